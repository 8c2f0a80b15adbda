"""Tests for the per-surveyor daily capacity guard."""

from survey_calendar.scheduling.capacity import CapacityGuard
from tests.conftest import DAY, make_booking, put


class TestCapacityGuard:
    def test_empty_day_can_book(self, store):
        guard = CapacityGuard(store, capacity=3)
        assert guard.can_book(7, DAY)
        assert guard.used(7, DAY) == 0
        assert guard.remaining(7, DAY) == 3

    def test_completed_bookings_count(self, store):
        guard = CapacityGuard(store, capacity=3)
        put(store, make_booking(idx="A", slot="9:00 AM", completed=True))
        put(store, make_booking(idx="B", slot="10:00 AM"))
        assert guard.used(7, DAY) == 2
        assert guard.can_book(7, DAY)

    def test_three_bookings_blocks(self, store):
        guard = CapacityGuard(store, capacity=3)
        for i, slot in enumerate(["9:00 AM", "11:00 AM", "2:00 PM"]):
            put(store, make_booking(idx=f"B{i}", slot=slot))
        assert not guard.can_book(7, DAY)
        assert guard.remaining(7, DAY) == 0

    def test_other_surveyors_unaffected(self, store):
        guard = CapacityGuard(store, capacity=3)
        for i, slot in enumerate(["9:00 AM", "11:00 AM", "2:00 PM"]):
            put(store, make_booking(idx=f"B{i}", slot=slot))
        assert guard.can_book(8, DAY)
        assert guard.can_book(7, "2024-06-11")

    def test_defaults_to_configured_capacity(self, store):
        assert CapacityGuard(store).capacity == 3

    def test_tooltip_mentions_capacity(self, store):
        assert "Maximum 3 surveys" in CapacityGuard(store, capacity=3).tooltip
