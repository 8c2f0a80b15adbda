"""Shared test fixtures and helpers."""

import json
from typing import Optional

import httpx
import pytest

from survey_calendar.scheduling.lifecycle import BookingLifecycleController
from survey_calendar.scheduling.status import SlotStatusDeriver
from survey_calendar.scheduling.store import BookingStore, SlotKey
from survey_calendar.scheduling.time_grid import label_to_wire, next_hour
from survey_calendar.schemas.booking_schema import Booking, CreateBookingRequest
from survey_calendar.tools.upstream import UpstreamClient

DAY = "2024-06-10"  # a Monday
BASE_URL = "https://upstream.test"
TOKEN = "Token test-token"


class FakeUpstream:
    """In-process stand-in for the upstream survey API."""

    def __init__(self, surveys: Optional[list[dict]] = None) -> None:
        self.surveys = list(surveys or [])
        self.requests: list[httpx.Request] = []
        self.fail_with: Optional[httpx.Response] = None
        self.raise_error: Optional[Exception] = None
        self.pages: Optional[list[dict]] = None
        self._counter = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if self.fail_with is not None:
            return self.fail_with

        if request.method == "GET":
            if self.pages is not None:
                page = int(request.url.params.get("page", "1"))
                return httpx.Response(200, json=self.pages[page - 1])
            return httpx.Response(
                200, json={"results": self.surveys, "total_pages": 1, "current_page": 1}
            )
        body = json.loads(request.content)
        if request.method == "POST":
            self._counter += 1
            return httpx.Response(201, json={"idx": f"SVY{self._counter:04d}", **body})
        if request.method == "PATCH":
            idx = request.url.path.rstrip("/").rsplit("/", 1)[-1]
            return httpx.Response(200, json={"idx": idx, **body})
        return httpx.Response(405, json={"detail": "Method not allowed"})

    def client(self) -> UpstreamClient:
        return UpstreamClient(
            base_url=BASE_URL,
            token=TOKEN,
            timeout=5.0,
            transport=httpx.MockTransport(self.handler),
        )

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def store():
    return BookingStore()


@pytest.fixture
def deriver(store):
    return SlotStatusDeriver(store)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def controller(store, upstream):
    return BookingLifecycleController(store, upstream.client(), capacity=3)


def make_booking(
    idx: str = "SVY-TEST",
    surveyor_id=7,
    slot: str = "10:00 AM",
    date: str = DAY,
    completed: bool = False,
    site_idx: str = "ST001",
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        idx=idx,
        surveyor_id=surveyor_id,
        surveyor_name=f"Surveyor {surveyor_id}",
        date=date,
        start_label=slot,
        end_label=next_hour(slot),
        time_slot=label_to_wire(slot),
        site_idx=site_idx,
        survey_type="FINAL",
        is_completed=completed,
        survey_remarks="done" if completed else None,
        survey_photo="data:image/png;base64,AAAA" if completed else None,
    )


def put(store: BookingStore, booking: Booking) -> Booking:
    """Insert a booking at its natural key."""
    store.insert(SlotKey.for_booking(booking), booking)
    return booking


def make_request(
    slot: str = "10:00 AM",
    surveyor_id=7,
    date: str = DAY,
    site_idx: str = "ST001",
    survey_type: str = "FINAL",
    remarks: str = "",
) -> CreateBookingRequest:
    return CreateBookingRequest(
        surveyor_id=surveyor_id,
        date=date,
        slot=slot,
        site_idx=site_idx,
        survey_type=survey_type,
        remarks=remarks,
    )


def make_survey(
    idx: str,
    surveyor_booking=7,
    time_slot: str = "10:00-11:00",
    site_idx: str = "ST001",
    site_id: str = "S-1",
    site_name: str = "Menara One",
    completed: bool = False,
) -> dict:
    """Helper to create an upstream survey payload."""
    return {
        "idx": idx,
        "site": {"idx": site_idx, "site_id": site_id, "name": site_name},
        "surveyor_booking": surveyor_booking,
        "time_slot": time_slot,
        "survey_type": "FINAL",
        "bd_remarks": "gate code 1234",
        "is_completed": completed,
        "completed_on": None,
        "survey_remarks": "done" if completed else None,
        "survey_photo_data_url": "data:image/png;base64,AAAA" if completed else None,
    }
