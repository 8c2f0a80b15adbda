"""
In-memory booking store keyed by (date, surveyor, slot).

The store is the single source of truth for every derived view. It is
owned by one ``CalendarSession`` and lives as long as that session; it is
rehydrated from the upstream list on load.

Raw ``insert`` overwrites an occupied key. Only the lifecycle controller
and the seeding step call it.
"""

import logging
from typing import Iterator, NamedTuple, Optional

from survey_calendar.scheduling.time_grid import DAY_TIMES
from survey_calendar.schemas.booking_schema import Booking
from survey_calendar.schemas.surveyor_schema import SurveyorId, normalize_surveyor_id
from survey_calendar.utils import DateLike, to_iso_date

logger = logging.getLogger(__name__)


class SlotKey(NamedTuple):
    """Natural key of a booking."""

    date: str
    surveyor_id: SurveyorId
    slot: str

    @classmethod
    def of(cls, date: DateLike, surveyor_id: SurveyorId, slot: str) -> "SlotKey":
        return cls(to_iso_date(date), normalize_surveyor_id(surveyor_id), slot)

    @classmethod
    def for_booking(cls, booking: Booking) -> "SlotKey":
        return cls(booking.date, booking.surveyor_id, booking.start_label)


class BookingStore:
    """Mapping from ``SlotKey`` to ``Booking``."""

    def __init__(self) -> None:
        self._bookings: dict[SlotKey, Booking] = {}

    def __len__(self) -> int:
        return len(self._bookings)

    def __contains__(self, key: object) -> bool:
        return key in self._bookings

    def __iter__(self) -> Iterator[SlotKey]:
        return iter(list(self._bookings))

    def get(self, key: SlotKey) -> Optional[Booking]:
        return self._bookings.get(key)

    def insert(self, key: SlotKey, booking: Booking) -> Optional[Booking]:
        """Store ``booking`` at ``key`` and return whatever it replaced."""
        previous = self._bookings.get(key)
        self._bookings[key] = booking
        if previous is not None:
            logger.debug("Overwrote booking %s at %s with %s", previous.idx, key, booking.idx)
        return previous

    def delete(self, key: SlotKey) -> Optional[Booking]:
        return self._bookings.pop(key, None)

    def items(self) -> list[tuple[SlotKey, Booking]]:
        """Snapshot of every (key, booking) pair for full scans."""
        return list(self._bookings.items())

    def find_by_idx(self, idx: str) -> list[tuple[SlotKey, Booking]]:
        return [(k, b) for k, b in self._bookings.items() if b.idx == idx]

    def bookings_for(self, surveyor_id: SurveyorId, date: DateLike) -> list[Booking]:
        """Bookings for one surveyor on one date, in grid order."""
        iso = to_iso_date(date)
        surveyor_id = normalize_surveyor_id(surveyor_id)
        found = []
        for slot in DAY_TIMES:
            booking = self._bookings.get(SlotKey(iso, surveyor_id, slot))
            if booking is not None:
                found.append(booking)
        return found

    def count_for(self, surveyor_id: SurveyorId, date: DateLike) -> int:
        """Booked-or-completed count on grid slots for one surveyor and date."""
        return len(self.bookings_for(surveyor_id, date))

    def clear(self) -> None:
        self._bookings.clear()
