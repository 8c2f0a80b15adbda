"""
Rehydrate a booking store from the upstream survey list.

The upstream model has no date, so every fetched booking is seeded
against the day currently being viewed.
"""

import logging
from typing import Iterable, Mapping, TypedDict

from survey_calendar.config import settings
from survey_calendar.scheduling.store import BookingStore, SlotKey
from survey_calendar.scheduling.time_grid import is_grid_slot, wire_to_labels
from survey_calendar.schemas.booking_schema import Booking
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId, is_valid_surveyor_id
from survey_calendar.schemas.upstream_schema import UpstreamSurvey
from survey_calendar.utils import DateLike, to_iso_date

logger = logging.getLogger(__name__)


class SiteOption(TypedDict):
    """One entry of the site picker."""

    idx: str
    label: str


class SeedReport(TypedDict):
    """Counts from one seeding pass."""

    seeded: int
    skipped_off_grid: int
    skipped_no_account: int
    skipped_over_capacity: int


def build_site_directory(surveys: Iterable[UpstreamSurvey]) -> list[SiteOption]:
    """Deduplicated site options in first-seen order."""
    seen: dict[str, str] = {}
    for survey in surveys:
        idx = survey.site.idx
        if idx and idx not in seen:
            seen[idx] = survey.site.label
    return [{"idx": idx, "label": label} for idx, label in seen.items()]


def booking_from_upstream(survey: UpstreamSurvey, date: str, surveyor: Surveyor) -> Booking:
    start, end = wire_to_labels(survey.time_slot)
    site_name = survey.site.label
    return Booking(
        idx=survey.idx,
        surveyor_id=surveyor.booking_id,
        surveyor_name=surveyor.name,
        region=surveyor.region,
        state=surveyor.state,
        date=date,
        start_label=start,
        end_label=end,
        time_slot=survey.time_slot,
        site_idx=survey.site.idx,
        site_name=site_name,
        project_site_name=site_name,
        survey_type=survey.survey_type,
        remarks=survey.bd_remarks or "",
        is_completed=survey.is_completed,
        survey_remarks=survey.survey_remarks or None,
        survey_photo=survey.survey_photo_data_url or None,
    )


def seed_store(
    store: BookingStore,
    surveys: Iterable[UpstreamSurvey],
    surveyors: Mapping[SurveyorId, Surveyor],
    date: DateLike,
    capacity: int = 0,
) -> SeedReport:
    """
    Replace the store contents with the fetched bookings on ``date``.

    Bookings whose slot falls outside the day grid, or that would push a
    surveyor past the daily cap, are skipped with a warning. A later
    record at an already seeded key replaces the earlier one.
    """
    cap = capacity or settings.calendar.daily_capacity
    iso = to_iso_date(date)
    report: SeedReport = {
        "seeded": 0,
        "skipped_off_grid": 0,
        "skipped_no_account": 0,
        "skipped_over_capacity": 0,
    }
    store.clear()

    for survey in surveys:
        surveyor_id = survey.surveyor_booking
        if surveyor_id is None or not is_valid_surveyor_id(surveyor_id):
            report["skipped_no_account"] += 1
            continue

        surveyor = surveyors.get(surveyor_id) or Surveyor(
            booking_id=surveyor_id, name=f"Surveyor {surveyor_id}"
        )
        booking = booking_from_upstream(survey, iso, surveyor)
        if not is_grid_slot(booking.start_label):
            logger.warning("Survey %s has off-grid slot %r; not shown", survey.idx, survey.time_slot)
            report["skipped_off_grid"] += 1
            continue

        key = SlotKey.for_booking(booking)
        if key not in store and store.count_for(surveyor_id, iso) >= cap:
            logger.warning(
                "Survey %s would exceed %d bookings for surveyor %s; not shown",
                survey.idx, cap, surveyor_id,
            )
            report["skipped_over_capacity"] += 1
            continue

        store.insert(key, booking)
        report["seeded"] += 1

    logger.info("Seeded %d bookings for %s", len(store), iso)
    return report
