"""
Slot status derivation.

Status is never stored. Every call reads the booking store as it is now,
so views cannot drift from the underlying bookings.
"""

from dataclasses import dataclass, field
from typing import Iterable

from survey_calendar.scheduling.store import BookingStore, SlotKey
from survey_calendar.scheduling.time_grid import DAY_TIMES
from survey_calendar.schemas.booking_schema import SlotStatus
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId, is_valid_surveyor_id
from survey_calendar.utils import DateLike, to_iso_date


@dataclass
class DayRow:
    """One surveyor's row in the day grid."""

    surveyor: Surveyor
    slots: dict[str, SlotStatus] = field(default_factory=dict)

    def has_status(self, status: SlotStatus) -> bool:
        return any(s == status for s in self.slots.values())


class SlotStatusDeriver:
    """Computes slot status from current booking store contents."""

    def __init__(self, store: BookingStore) -> None:
        self._store = store

    def derive_status(self, surveyor_id: SurveyorId, date: DateLike, slot: str) -> SlotStatus:
        if not is_valid_surveyor_id(surveyor_id):
            return SlotStatus.UNAVAILABLE
        booking = self._store.get(SlotKey.of(date, surveyor_id, slot))
        if booking is None:
            return SlotStatus.AVAILABLE
        if booking.is_completed:
            return SlotStatus.COMPLETED
        return SlotStatus.BOOKED

    def derive_day(self, surveyor_id: SurveyorId, date: DateLike) -> dict[str, SlotStatus]:
        """Status of all eight slots for one surveyor, in grid order."""
        iso = to_iso_date(date)
        return {slot: self.derive_status(surveyor_id, iso, slot) for slot in DAY_TIMES}

    def build_day_rows(self, surveyors: Iterable[Surveyor], date: DateLike) -> list[DayRow]:
        iso = to_iso_date(date)
        return [DayRow(surveyor=s, slots=self.derive_day(s.booking_id, iso)) for s in surveyors]
