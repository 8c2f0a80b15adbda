"""Booking records, slot status, and lifecycle request models."""

from datetime import date as date_cls
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from survey_calendar.schemas.surveyor_schema import SurveyorId


class SlotStatus(str, Enum):
    """Derived status of one (surveyor, date, slot) cell."""

    AVAILABLE = "available"
    BOOKED = "booked"
    COMPLETED = "completed"
    UNAVAILABLE = "unavailable"


class Booking(BaseModel):
    """A scheduled survey occupying one slot for one surveyor on one date.

    Instances are frozen. Completion and rescheduling produce a new value
    via ``model_copy`` so a stored booking is never edited in place.
    """

    model_config = ConfigDict(frozen=True)

    idx: str
    surveyor_id: SurveyorId
    surveyor_name: str = ""
    region: str = ""
    state: str = ""
    date: str
    start_label: str
    end_label: str
    time_slot: str
    site_idx: str
    site_name: str = ""
    project_site_name: str = ""
    survey_type: str
    remarks: str = ""
    is_completed: bool = False
    survey_remarks: Optional[str] = None
    survey_photo: Optional[str] = None

    @property
    def slot_range(self) -> str:
        return f"{self.start_label} - {self.end_label}"

    @property
    def display_site(self) -> str:
        return self.site_name or self.project_site_name or self.site_idx


class CreateBookingRequest(BaseModel):
    """Inputs for booking a free slot."""

    surveyor_id: SurveyorId
    date: date_cls
    slot: str
    site_idx: str
    survey_type: str
    remarks: str = ""
    project_site_name: str = ""

    @field_validator("site_idx", "survey_type", "remarks", "project_site_name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @property
    def is_complete(self) -> bool:
        return bool(self.site_idx and self.survey_type)


class CompleteBookingRequest(BaseModel):
    """Inputs for marking a booking completed."""

    remarks: str
    photo: str

    @field_validator("remarks", "photo")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @property
    def is_complete(self) -> bool:
        return bool(self.remarks and self.photo)
