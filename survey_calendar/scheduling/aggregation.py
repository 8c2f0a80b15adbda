"""
Week-usage and month-density rollups over the booking store.

Week view: for each surveyor and each Mon..Sat date, how many of the
daily slots are used. Month view: for each date, booking pressure across
every surveyor with an account, classified into a coloured indicator.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from survey_calendar.config import settings
from survey_calendar.scheduling.store import BookingStore
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId
from survey_calendar.utils import DateLike, month_dates, week_dates

logger = logging.getLogger(__name__)

FULL_RATIO = 1.0
PARTIAL_RATIO = 0.33


@dataclass(frozen=True)
class WeekUsage:
    """Used and total slots for one surveyor on one date."""

    used: int
    total: int

    @property
    def ratio(self) -> float:
        return 0.0 if self.total == 0 else self.used / self.total


def usage_bucket(ratio: float) -> str:
    """Bucket a usage ratio the way the week grid colours it."""
    if ratio >= FULL_RATIO:
        return "full"
    if ratio >= PARTIAL_RATIO:
        return "partial"
    return "light"


def week_usage(
    store: BookingStore,
    surveyors: Iterable[Surveyor],
    anchor: DateLike,
    capacity: Optional[int] = None,
) -> dict[SurveyorId, dict[str, WeekUsage]]:
    """Usage per surveyor per Mon..Sat date of the week containing ``anchor``."""
    total = capacity if capacity is not None else settings.calendar.daily_capacity
    days = week_dates(anchor)
    usage: dict[SurveyorId, dict[str, WeekUsage]] = {}
    for surveyor in surveyors:
        usage[surveyor.booking_id] = {
            iso: WeekUsage(used=store.count_for(surveyor.booking_id, iso), total=total)
            for iso in days
        }
    return usage


class DensityLevel(str, Enum):
    """Month-view indicator colour."""
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


@dataclass(frozen=True)
class MonthDensity:
    """Booking pressure for one date across all surveyors."""

    date: str
    used: int
    capacity: int
    level: DensityLevel

    @property
    def ratio(self) -> float:
        return self.used / self.capacity

    @property
    def fully_booked(self) -> bool:
        return self.ratio >= FULL_RATIO

    @property
    def dots(self) -> list[DensityLevel]:
        """Indicator dots; a fully booked date gets two red dots."""
        if self.fully_booked:
            return [DensityLevel.RED, DensityLevel.RED]
        return [self.level]


def classify_density(ratio: float) -> Optional[DensityLevel]:
    if ratio <= 0:
        return None
    if ratio >= settings.density.red_threshold:
        return DensityLevel.RED
    if ratio >= settings.density.orange_threshold:
        return DensityLevel.ORANGE
    return DensityLevel.GREEN


def month_density(
    store: BookingStore,
    surveyors: Iterable[Surveyor],
    year: int,
    month: int,
    capacity: Optional[int] = None,
) -> dict[str, MonthDensity]:
    """
    Density for every date in the month that has bookings.

    Dates with no bookings, or no surveyor capacity at all, get no entry.
    """
    per_day = capacity if capacity is not None else settings.calendar.daily_capacity
    valid = [s for s in surveyors if s.has_account]
    total_capacity = len(valid) * per_day
    if total_capacity <= 0:
        logger.debug("No surveyor capacity for %d-%02d; month density skipped", year, month)
        return {}

    densities: dict[str, MonthDensity] = {}
    for iso in month_dates(year, month):
        used = sum(store.count_for(s.booking_id, iso) for s in valid)
        level = classify_density(used / total_capacity)
        if level is None:
            continue
        densities[iso] = MonthDensity(date=iso, used=used, capacity=total_capacity, level=level)
    return densities
