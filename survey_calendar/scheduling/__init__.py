from survey_calendar.scheduling.aggregation import month_density, week_usage
from survey_calendar.scheduling.capacity import CapacityGuard
from survey_calendar.scheduling.lifecycle import (
    BookingLifecycleController,
    BookingState,
    InvalidTransitionError,
)
from survey_calendar.scheduling.status import SlotStatusDeriver
from survey_calendar.scheduling.store import BookingStore, SlotKey

__all__ = [
    "BookingLifecycleController",
    "BookingState",
    "InvalidTransitionError",
    "BookingStore",
    "SlotKey",
    "SlotStatusDeriver",
    "CapacityGuard",
    "week_usage",
    "month_density",
]
