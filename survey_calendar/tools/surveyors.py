"""
Surveyor roster derived from upstream bookings.

The upstream list only exposes surveyor booking-account ids, so display
names are positional ("Surveyor #1") and region/state are assigned from
a seeded generator so the same roster renders identically across loads.
"""

import logging
import random
from typing import Iterable, Optional

from survey_calendar.config import settings
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId, is_valid_surveyor_id
from survey_calendar.schemas.upstream_schema import UpstreamSurvey

logger = logging.getLogger(__name__)

MALAYSIA_REGIONS: list[str] = ["Central", "Northern", "Southern", "East Coast", "East Malaysia"]

MALAYSIA_STATES: list[str] = [
    "Johor", "Kedah", "Kelantan", "Melaka", "Negeri Sembilan", "Pahang", "Perak", "Perlis",
    "Pulau Pinang", "Sabah", "Sarawak", "Selangor", "Terengganu", "Kuala Lumpur", "Putrajaya",
    "Labuan",
]

REGION_STATES: dict[str, list[str]] = {
    "Central": ["Selangor", "Kuala Lumpur", "Putrajaya", "Negeri Sembilan"],
    "Northern": ["Pulau Pinang", "Perak", "Kedah", "Perlis"],
    "Southern": ["Johor", "Melaka"],
    "East Coast": ["Kelantan", "Terengganu", "Pahang"],
    "East Malaysia": ["Sabah", "Sarawak", "Labuan"],
}


def _sort_key(surveyor_id: SurveyorId) -> tuple[int, str]:
    # integer ids sort numerically ahead of external string keys
    if isinstance(surveyor_id, int):
        return (0, f"{surveyor_id:020d}")
    return (1, surveyor_id)


def surveyor_ids(surveys: Iterable[UpstreamSurvey]) -> list[SurveyorId]:
    """Unique valid surveyor account ids, sorted."""
    ids = {
        s.surveyor_booking
        for s in surveys
        if s.surveyor_booking is not None and is_valid_surveyor_id(s.surveyor_booking)
    }
    return sorted(ids, key=_sort_key)


def derive_surveyors(
    surveys: Iterable[UpstreamSurvey],
    placeholder_count: Optional[int] = None,
    seed: Optional[int] = None,
) -> list[Surveyor]:
    """
    Build the calendar roster.

    When no booking references a surveyor account, a roster of
    placeholder surveyors with the sentinel id 0 is returned; they
    are unavailable for every slot.
    """
    rng = random.Random(seed if seed is not None else settings.calendar.surveyor_seed)
    ids = surveyor_ids(surveys)
    if ids:
        return [
            Surveyor(
                booking_id=bid,
                name=f"Surveyor #{i + 1}",
                region=rng.choice(MALAYSIA_REGIONS),
                state=rng.choice(MALAYSIA_STATES),
            )
            for i, bid in enumerate(ids)
        ]

    count = placeholder_count if placeholder_count is not None else settings.calendar.placeholder_surveyors
    logger.info("No surveyor accounts in upstream data; using %d placeholders", count)
    return [
        Surveyor(
            booking_id=0,
            name=f"Surveyor #{i + 1}",
            region=rng.choice(MALAYSIA_REGIONS),
            state=rng.choice(MALAYSIA_STATES),
        )
        for i in range(count)
    ]
