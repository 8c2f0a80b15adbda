"""Tests for the daily time grid and 12h/24h conversions."""

import pytest

from survey_calendar.scheduling.time_grid import (
    DAY_TIMES,
    DEFAULT_WIRE_START,
    from_am_pm,
    is_grid_slot,
    label_to_wire,
    next_hour,
    slot_index,
    slot_range_label,
    slots_after,
    to_am_pm,
    wire_to_labels,
)


class TestDayTimes:
    def test_eight_slots(self):
        assert len(DAY_TIMES) == 8

    def test_first_and_last(self):
        assert DAY_TIMES[0] == "9:00 AM"
        assert DAY_TIMES[-1] == "4:00 PM"

    def test_slots_are_contiguous(self):
        for current, following in zip(DAY_TIMES, DAY_TIMES[1:]):
            assert next_hour(current) == following

    def test_is_grid_slot(self):
        assert is_grid_slot("12:00 PM")
        assert not is_grid_slot("5:00 PM")

    def test_slot_index(self):
        assert slot_index("9:00 AM") == 0
        assert slot_index("4:00 PM") == 7
        assert slot_index("bogus") == -1


class TestNextHour:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("9:00 AM", "10:00 AM"),
            ("11:00 AM", "12:00 PM"),
            ("12:00 PM", "1:00 PM"),
            ("4:00 PM", "5:00 PM"),
            ("11:00 PM", "12:00 AM"),
            ("9:30 AM", "10:30 AM"),
        ],
    )
    def test_next_hour(self, label, expected):
        assert next_hour(label) == expected

    def test_malformed_returned_unchanged(self):
        assert next_hour("ten o'clock") == "ten o'clock"
        assert next_hour("") == ""


class TestConversions:
    def test_to_am_pm(self):
        assert to_am_pm("09:00") == "9:00 AM"
        assert to_am_pm("12:00") == "12:00 PM"
        assert to_am_pm("13:00") == "1:00 PM"
        assert to_am_pm("00:00") == "12:00 AM"

    def test_to_am_pm_malformed_unchanged(self):
        assert to_am_pm("noon") == "noon"
        assert to_am_pm("25:00") == "25:00"

    def test_from_am_pm(self):
        assert from_am_pm("9:00 AM") == "09:00"
        assert from_am_pm("12:00 PM") == "12:00"
        assert from_am_pm("12:00 AM") == "00:00"
        assert from_am_pm("4:00 PM") == "16:00"

    def test_from_am_pm_malformed_defaults(self):
        assert from_am_pm("whenever") == DEFAULT_WIRE_START

    def test_label_to_wire(self):
        assert label_to_wire("10:00 AM") == "10:00-11:00"
        assert label_to_wire("12:00 PM") == "12:00-13:00"
        assert label_to_wire("4:00 PM") == "16:00-17:00"

    def test_wire_to_labels(self):
        assert wire_to_labels("10:00-11:00") == ("10:00 AM", "11:00 AM")
        assert wire_to_labels("13:00-14:00") == ("1:00 PM", "2:00 PM")

    def test_wire_without_end_uses_next_hour(self):
        assert wire_to_labels("15:00") == ("3:00 PM", "4:00 PM")

    def test_wire_garbage_does_not_raise(self):
        start, end = wire_to_labels("garbage")
        assert start == "garbage"
        assert end == "garbage"

    def test_every_grid_slot_round_trips(self):
        for label in DAY_TIMES:
            assert wire_to_labels(label_to_wire(label))[0] == label

    def test_slot_range_label(self):
        assert slot_range_label("11:00 AM") == "11:00 AM - 12:00 PM"


class TestSlotsAfter:
    def test_scans_forward_and_wraps(self):
        assert slots_after("3:00 PM") == [
            "4:00 PM", "9:00 AM", "10:00 AM", "11:00 AM", "12:00 PM", "1:00 PM", "2:00 PM",
        ]

    def test_excludes_current_slot(self):
        for label in DAY_TIMES:
            after = slots_after(label)
            assert label not in after
            assert len(after) == 7

    def test_unknown_label_scans_whole_day(self):
        assert slots_after("6:00 PM") == list(DAY_TIMES)
