"""Tests for the in-memory booking store."""

from datetime import date

from survey_calendar.scheduling.store import BookingStore, SlotKey
from tests.conftest import DAY, make_booking, put


class TestSlotKey:
    def test_normalizes_date(self):
        assert SlotKey.of(date(2024, 6, 10), 7, "9:00 AM") == SlotKey(DAY, 7, "9:00 AM")

    def test_numeric_string_surveyor_matches_int(self):
        assert SlotKey.of(DAY, "7", "9:00 AM") == SlotKey.of(DAY, 7, "9:00 AM")

    def test_external_key_kept_as_string(self):
        assert SlotKey.of(DAY, " SRV-7 ", "9:00 AM").surveyor_id == "SRV-7"

    def test_for_booking_uses_start_label(self):
        booking = make_booking(slot="2:00 PM")
        assert SlotKey.for_booking(booking) == SlotKey(DAY, 7, "2:00 PM")


class TestBookingStore:
    def test_empty(self, store):
        assert len(store) == 0
        assert store.get(SlotKey(DAY, 7, "9:00 AM")) is None

    def test_insert_and_get(self, store):
        booking = put(store, make_booking())
        key = SlotKey(DAY, 7, "10:00 AM")
        assert key in store
        assert store.get(key) == booking

    def test_insert_overwrites(self, store):
        put(store, make_booking(idx="A"))
        replaced = store.insert(SlotKey(DAY, 7, "10:00 AM"), make_booking(idx="B"))
        assert replaced.idx == "A"
        assert store.get(SlotKey(DAY, 7, "10:00 AM")).idx == "B"
        assert len(store) == 1

    def test_delete(self, store):
        put(store, make_booking())
        removed = store.delete(SlotKey(DAY, 7, "10:00 AM"))
        assert removed.idx == "SVY-TEST"
        assert len(store) == 0

    def test_delete_missing_returns_none(self, store):
        assert store.delete(SlotKey(DAY, 7, "10:00 AM")) is None

    def test_items_is_snapshot(self, store):
        put(store, make_booking(idx="A", slot="9:00 AM"))
        put(store, make_booking(idx="B", slot="11:00 AM"))
        for key, _ in store.items():
            store.delete(key)
        assert len(store) == 0

    def test_find_by_idx(self, store):
        put(store, make_booking(idx="A", slot="9:00 AM"))
        put(store, make_booking(idx="B", slot="11:00 AM"))
        found = store.find_by_idx("B")
        assert [k.slot for k, _ in found] == ["11:00 AM"]

    def test_bookings_for_in_grid_order(self, store):
        put(store, make_booking(idx="late", slot="3:00 PM"))
        put(store, make_booking(idx="early", slot="9:00 AM"))
        put(store, make_booking(idx="other", slot="9:00 AM", surveyor_id=8))
        assert [b.idx for b in store.bookings_for(7, DAY)] == ["early", "late"]

    def test_count_accepts_numeric_string_id(self, store):
        put(store, make_booking(slot="9:00 AM"))
        assert store.count_for("7", DAY) == 1

    def test_count_ignores_other_dates(self, store):
        put(store, make_booking(slot="9:00 AM"))
        put(store, make_booking(slot="9:00 AM", date="2024-06-11"))
        assert store.count_for(7, DAY) == 1

    def test_count_ignores_off_grid_keys(self, store):
        store.insert(SlotKey(DAY, 7, "6:00 PM"), make_booking(slot="6:00 PM"))
        assert store.count_for(7, DAY) == 0

    def test_clear(self, store):
        put(store, make_booking())
        store.clear()
        assert len(store) == 0

    def test_stores_are_independent(self):
        a, b = BookingStore(), BookingStore()
        put(a, make_booking())
        assert len(b) == 0
