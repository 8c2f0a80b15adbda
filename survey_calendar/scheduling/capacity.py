"""Per-surveyor daily booking cap."""

import logging
from typing import Optional

from survey_calendar.config import settings
from survey_calendar.scheduling.store import BookingStore
from survey_calendar.schemas.surveyor_schema import SurveyorId
from survey_calendar.utils import DateLike

logger = logging.getLogger(__name__)

CAPACITY_TOOLTIP = "Maximum {capacity} surveys per day for this surveyor."


class CapacityGuard:
    """Answers whether a surveyor can take another booking on a date.

    Booked and completed surveys both count towards the cap.
    """

    def __init__(self, store: BookingStore, capacity: Optional[int] = None) -> None:
        self._store = store
        self.capacity = capacity if capacity is not None else settings.calendar.daily_capacity

    def used(self, surveyor_id: SurveyorId, date: DateLike) -> int:
        return self._store.count_for(surveyor_id, date)

    def remaining(self, surveyor_id: SurveyorId, date: DateLike) -> int:
        return max(self.capacity - self.used(surveyor_id, date), 0)

    def can_book(self, surveyor_id: SurveyorId, date: DateLike) -> bool:
        return self.used(surveyor_id, date) < self.capacity

    @property
    def tooltip(self) -> str:
        return CAPACITY_TOOLTIP.format(capacity=self.capacity)
