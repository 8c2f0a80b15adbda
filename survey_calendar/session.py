"""
One serving session of the survey calendar.

The session owns the booking store for its lifetime, loads it from the
upstream list, and exposes the day, week, and month views plus the
lifecycle controller that mutates it.
"""

import logging
import uuid
from datetime import date as date_cls
from datetime import timedelta
from typing import Optional

from survey_calendar.logging_context import bind_session
from survey_calendar.scheduling.aggregation import MonthDensity, WeekUsage, month_density, week_usage
from survey_calendar.scheduling.filters import RowFilter
from survey_calendar.scheduling.lifecycle import BookingLifecycleController
from survey_calendar.scheduling.status import DayRow
from survey_calendar.scheduling.store import BookingStore
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId
from survey_calendar.tools.seeding import SeedReport, SiteOption, build_site_directory, seed_store
from survey_calendar.tools.surveyors import derive_surveyors
from survey_calendar.tools.upstream import UpstreamClient, UpstreamError
from survey_calendar.utils import DateLike, parse_iso_date

logger = logging.getLogger(__name__)


class CalendarSession:
    """Holds the store, roster, and site directory for one viewer."""

    def __init__(
        self,
        client: Optional[UpstreamClient] = None,
        today: Optional[DateLike] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or f"CAL-{uuid.uuid4().hex[:6]}"
        bind_session(self.session_id)
        self.client = client or UpstreamClient()
        self.store = BookingStore()
        self.controller = BookingLifecycleController(self.store, self.client)
        self.surveyors: list[Surveyor] = []
        self.sites: list[SiteOption] = []
        self.base_day = parse_iso_date(today) if today is not None else date_cls.today()
        self.day_offset = 0
        self.load_error: Optional[UpstreamError] = None

    @property
    def current_day(self) -> date_cls:
        return self.base_day + timedelta(days=self.day_offset)

    @property
    def surveyor_map(self) -> dict[SurveyorId, Surveyor]:
        return {s.booking_id: s for s in self.surveyors if s.has_account}

    def shift_day(self, days: int) -> date_cls:
        self.day_offset += days
        return self.current_day

    def go_today(self) -> date_cls:
        self.day_offset = 0
        return self.current_day

    async def load(self) -> Optional[SeedReport]:
        """Fetch upstream bookings and rebuild roster, sites, and store.

        On failure the error is kept on ``load_error`` and the previous
        state is left untouched.
        """
        bind_session(self.session_id)
        try:
            surveys = await self.client.fetch_all_surveys()
        except UpstreamError as exc:
            logger.error("Could not load surveys: %s", exc.detail)
            self.load_error = exc
            return None

        self.load_error = None
        self.surveyors = derive_surveyors(surveys)
        self.sites = build_site_directory(surveys)
        report = seed_store(self.store, surveys, self.surveyor_map, self.current_day)
        self.controller.update_directory(
            self.surveyor_map, {site["idx"]: site["label"] for site in self.sites}
        )
        logger.info(
            "Session loaded: %d surveyors, %d sites, %d bookings",
            len(self.surveyors), len(self.sites), report["seeded"],
        )
        return report

    def day_rows(self, row_filter: Optional[RowFilter] = None) -> list[DayRow]:
        rows = self.controller.deriver.build_day_rows(self.surveyors, self.current_day)
        return (row_filter or RowFilter()).apply(rows)

    def week_usage(self) -> dict[SurveyorId, dict[str, WeekUsage]]:
        return week_usage(self.store, self.surveyors, self.current_day, self.controller.guard.capacity)

    def month_density(self, year: Optional[int] = None, month: Optional[int] = None) -> dict[str, MonthDensity]:
        day = self.current_day
        return month_density(
            self.store,
            self.surveyors,
            year or day.year,
            month or day.month,
            self.controller.guard.capacity,
        )
