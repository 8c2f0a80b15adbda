"""Day-grid row filters: region, state, slot status, and surveyor name."""

from dataclasses import dataclass
from typing import Iterable

from survey_calendar.scheduling.status import DayRow
from survey_calendar.schemas.booking_schema import SlotStatus
from survey_calendar.tools.surveyors import MALAYSIA_STATES, REGION_STATES

ALL_REGIONS = "All Regions"
ALL_STATES = "All States"
ALL_STATUS = "All Status"


def states_for_region(region: str) -> list[str]:
    """State options offered once a region is picked."""
    return list(REGION_STATES.get(region, MALAYSIA_STATES))


@dataclass(frozen=True)
class RowFilter:
    """Applied filter values. The defaults match every row."""

    region: str = ALL_REGIONS
    state: str = ALL_STATES
    status: str = ALL_STATUS
    surveyor: str = ""

    def matches(self, row: DayRow) -> bool:
        meta = row.surveyor
        if self.region != ALL_REGIONS and meta.region != self.region:
            return False
        if self.state != ALL_STATES and meta.state != self.state:
            return False

        query = self.surveyor.strip().lower()
        if query and query not in meta.name.lower():
            return False

        if self.status != ALL_STATUS:
            try:
                desired = SlotStatus(self.status.strip().lower())
            except ValueError:
                return False
            # at least one slot must carry the requested status
            if not row.has_status(desired):
                return False
        return True

    def apply(self, rows: Iterable[DayRow]) -> list[DayRow]:
        return [row for row in rows if self.matches(row)]
