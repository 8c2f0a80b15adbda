"""Payload models for the upstream survey API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from survey_calendar.schemas.surveyor_schema import SurveyorId


class UpstreamSite(BaseModel):
    """Site reference embedded in a survey record."""
    model_config = ConfigDict(extra="ignore")

    idx: str
    site_id: Optional[str] = None
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.site_id or ''} {self.name or ''}".strip() or self.idx


class UpstreamSurvey(BaseModel):
    """One survey booking as returned by the upstream list endpoint."""
    model_config = ConfigDict(extra="ignore")

    idx: str
    site: UpstreamSite
    surveyor_booking: Optional[SurveyorId] = None
    time_slot: str
    survey_type: str = ""
    bd_remarks: Optional[str] = None
    is_completed: bool = False
    completed_on: Optional[str] = None
    survey_remarks: Optional[str] = None
    survey_photo_data_url: Optional[str] = None


class UpstreamSurveyList(BaseModel):
    """Paginated list envelope."""
    model_config = ConfigDict(extra="ignore")

    results: list[UpstreamSurvey] = Field(default_factory=list)
    total_pages: Optional[int] = None
    total_records: Optional[int] = None
    next_page_url: Optional[str] = None
    previous_page_url: Optional[str] = None
    current_page: Optional[int] = None


class UpstreamCreatePayload(BaseModel):
    """Body sent when creating a survey upstream."""
    site: str
    surveyor_booking: SurveyorId
    time_slot: str
    survey_type: str
    bd_remarks: str = ""


class UpstreamCompletePayload(BaseModel):
    """Body sent when marking a survey completed upstream."""
    is_completed: bool = True
    survey_remarks: str
    survey_photo_data_url: str
