"""
Booking lifecycle: create, cancel, reschedule, and complete.

Each booking follows a small finite state machine. ``available`` is
implicit (no booking at the key) and ``completed`` is terminal:

    available --create--> booked --complete--> completed
                          booked --cancel----> deleted
                          booked --reschedule-> booked (at another key)

Operations never raise past the controller. Every call returns a
``BookingResult`` describing success or a benign failure. Remote calls
happen before any local mutation, so a failed upstream call leaves the
store exactly as it was.

Usage:
    controller = BookingLifecycleController(store, client)
    result = await controller.create(CreateBookingRequest(...))
    if not result["success"]:
        show(result["message"])
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, TypedDict

from survey_calendar.scheduling.capacity import CapacityGuard
from survey_calendar.scheduling.status import SlotStatusDeriver
from survey_calendar.scheduling.store import BookingStore, SlotKey
from survey_calendar.scheduling.time_grid import (
    is_grid_slot,
    label_to_wire,
    next_hour,
    slots_after,
)
from survey_calendar.schemas.booking_schema import (
    Booking,
    CompleteBookingRequest,
    CreateBookingRequest,
    SlotStatus,
)
from survey_calendar.schemas.surveyor_schema import Surveyor, SurveyorId, is_valid_surveyor_id
from survey_calendar.schemas.upstream_schema import UpstreamCompletePayload, UpstreamCreatePayload
from survey_calendar.tools.upstream import UpstreamClient, UpstreamError
from survey_calendar.utils import DateLike

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    """Lifecycle state of the booking at one natural key."""
    AVAILABLE = "available"
    BOOKED = "booked"
    COMPLETED = "completed"
    DELETED = "deleted"


class BookingEvent(str, Enum):
    """Operations that move a booking between states."""
    CREATE = "create"
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: BookingState
    to_state: BookingState
    event: BookingEvent


class InvalidTransitionError(Exception):
    """Raised when an event is not valid from the booking's current state."""


TRANSITIONS: list[Transition] = [
    Transition(BookingState.AVAILABLE, BookingState.BOOKED, BookingEvent.CREATE),
    Transition(BookingState.BOOKED, BookingState.DELETED, BookingEvent.CANCEL),
    Transition(BookingState.BOOKED, BookingState.BOOKED, BookingEvent.RESCHEDULE),
    Transition(BookingState.BOOKED, BookingState.COMPLETED, BookingEvent.COMPLETE),
]


def state_of(booking: Optional[Booking]) -> BookingState:
    if booking is None:
        return BookingState.AVAILABLE
    return BookingState.COMPLETED if booking.is_completed else BookingState.BOOKED


def valid_events(state: BookingState) -> list[BookingEvent]:
    return [t.event for t in TRANSITIONS if t.from_state == state]


def next_state(state: BookingState, event: BookingEvent) -> BookingState:
    """
    Resolve a transition.

    Raises:
        InvalidTransitionError: If ``event`` is not allowed from ``state``.
    """
    for t in TRANSITIONS:
        if t.from_state == state and t.event == event:
            return t.to_state
    valid = [e.value for e in valid_events(state)]
    raise InvalidTransitionError(
        f"Cannot {event.value} a booking that is '{state.value}'. Valid events: {valid}"
    )


class FailureReason(str, Enum):
    """Why an operation did not change anything."""
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    CAPACITY = "capacity"
    UPSTREAM = "upstream"


class BookingResult(TypedDict, total=False):
    """Outcome of a lifecycle operation."""

    success: bool
    message: str
    reason: FailureReason
    booking: Optional[Booking]
    status_code: int
    error: dict
    cancelled: bool


def _failure(reason: FailureReason, message: str, **extra) -> BookingResult:
    result: BookingResult = {"success": False, "reason": reason, "message": message}
    result.update(extra)  # type: ignore[typeddict-item]
    return result


def _slot_key(date: DateLike, surveyor_id: SurveyorId, slot: str) -> Optional[SlotKey]:
    """Build the key for an operation, or None when the date does not parse."""
    try:
        return SlotKey.of(date, surveyor_id, slot)
    except ValueError:
        logger.debug("Malformed date %r for surveyor %s", date, surveyor_id)
        return None


class BookingLifecycleController:
    """
    Orchestrates booking transitions against an injected store.

    The store is owned by the caller's session; the controller only
    mutates it through the four guarded operations below. Async
    operations are serialized by a lock so two remote round-trips never
    interleave their check-then-insert steps.
    """

    def __init__(
        self,
        store: BookingStore,
        client: UpstreamClient,
        surveyors: Optional[Mapping[SurveyorId, Surveyor]] = None,
        site_labels: Optional[Mapping[str, str]] = None,
        capacity: Optional[int] = None,
    ) -> None:
        self._store = store
        self._client = client
        self._surveyors: dict[SurveyorId, Surveyor] = dict(surveyors or {})
        self._site_labels: dict[str, str] = dict(site_labels or {})
        self.deriver = SlotStatusDeriver(store)
        self.guard = CapacityGuard(store, capacity)
        self._lock = asyncio.Lock()

    def update_directory(
        self,
        surveyors: Mapping[SurveyorId, Surveyor],
        site_labels: Mapping[str, str],
    ) -> None:
        """Refresh surveyor and site lookups after the session reloads."""
        self._surveyors = dict(surveyors)
        self._site_labels = dict(site_labels)

    # ------------------------------------------------------------------ #
    # Queries used to enable or disable actions
    # ------------------------------------------------------------------ #

    def can_create(self, surveyor_id: SurveyorId, date: DateLike, slot: str) -> bool:
        return (
            is_valid_surveyor_id(surveyor_id)
            and is_grid_slot(slot)
            and self.deriver.derive_status(surveyor_id, date, slot) == SlotStatus.AVAILABLE
            and self.guard.can_book(surveyor_id, date)
        )

    def booking_at(self, date: DateLike, surveyor_id: SurveyorId, slot: str) -> Optional[Booking]:
        return self._store.get(SlotKey.of(date, surveyor_id, slot))

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #

    def _check_create(self, key: SlotKey) -> Optional[BookingResult]:
        try:
            next_state(state_of(self._store.get(key)), BookingEvent.CREATE)
        except InvalidTransitionError as exc:
            logger.debug("Create refused at %s: %s", key, exc)
            return _failure(FailureReason.PRECONDITION, f"Slot {key.slot} is not available.")
        if not self.guard.can_book(key.surveyor_id, key.date):
            return _failure(FailureReason.CAPACITY, self.guard.tooltip)
        return None

    def _build_booking(self, idx: str, key: SlotKey, request: CreateBookingRequest) -> Booking:
        surveyor = self._surveyors.get(key.surveyor_id)
        return Booking(
            idx=idx,
            surveyor_id=key.surveyor_id,
            surveyor_name=surveyor.name if surveyor else f"Surveyor {key.surveyor_id}",
            region=surveyor.region if surveyor else "",
            state=surveyor.state if surveyor else "",
            date=key.date,
            start_label=key.slot,
            end_label=next_hour(key.slot),
            time_slot=label_to_wire(key.slot),
            site_idx=request.site_idx,
            site_name=self._site_labels.get(request.site_idx)
            or request.project_site_name
            or request.site_idx,
            project_site_name=request.project_site_name,
            survey_type=request.survey_type,
            remarks=request.remarks,
        )

    async def create(self, request: CreateBookingRequest) -> BookingResult:
        """Book a free slot, persisting upstream before touching the store.

        The sync ``cancel`` and ``reschedule`` do not take the lock and can
        move a booking into the slot while the upstream call is pending.
        The upstream survey then exists without a calendar entry; the result
        fails and carries its ``idx`` under ``error`` for reconciliation.
        """
        if not request.is_complete:
            return _failure(FailureReason.VALIDATION, "Site and survey type are required.")
        if not is_valid_surveyor_id(request.surveyor_id):
            return _failure(FailureReason.PRECONDITION, "Surveyor has no booking account.")
        if not is_grid_slot(request.slot):
            return _failure(FailureReason.PRECONDITION, f"{request.slot!r} is not a bookable slot.")

        key = SlotKey.of(request.date, request.surveyor_id, request.slot)

        async with self._lock:
            blocked = self._check_create(key)
            if blocked is not None:
                return blocked

            payload = UpstreamCreatePayload(
                site=request.site_idx,
                surveyor_booking=request.surveyor_id,
                time_slot=label_to_wire(request.slot),
                survey_type=request.survey_type,
                bd_remarks=request.remarks,
            )
            try:
                idx = await self._client.create_survey(payload)
            except UpstreamError as exc:
                logger.warning("Create at %s failed upstream: %s", key, exc.detail)
                return _failure(
                    FailureReason.UPSTREAM,
                    exc.detail,
                    status_code=exc.status_code,
                    error=exc.body,
                )

            # The store may have changed while the remote call was pending.
            blocked = self._check_create(key)
            if blocked is not None:
                logger.error("Slot %s was taken while creating %s upstream", key, idx)
                blocked["message"] = (
                    f"{blocked['message']} Survey {idx} was saved upstream but not added to the calendar."
                )
                blocked["error"] = {"idx": idx}
                blocked["booking"] = self._store.get(key)
                return blocked

            booking = self._build_booking(idx, key, request)
            self._store.insert(key, booking)

        logger.info(
            "Booking created: %s for surveyor %s on %s at %s",
            idx, key.surveyor_id, key.date, key.slot,
        )
        return {
            "success": True,
            "booking": booking,
            "message": f"Survey booked for {booking.slot_range} on {key.date}. Reference: {idx}.",
        }

    # ------------------------------------------------------------------ #
    # Cancel / reschedule (local only)
    # ------------------------------------------------------------------ #

    def cancel(self, date: DateLike, surveyor_id: SurveyorId, slot: str) -> BookingResult:
        """Remove a booked (not completed) survey from the calendar."""
        key = _slot_key(date, surveyor_id, slot)
        if key is None:
            return _failure(FailureReason.VALIDATION, f"{date!r} is not a valid date.")
        existing = self._store.get(key)
        try:
            next_state(state_of(existing), BookingEvent.CANCEL)
        except InvalidTransitionError as exc:
            logger.debug("Cancel ignored at %s: %s", key, exc)
            return _failure(FailureReason.PRECONDITION, str(exc), booking=existing)

        self._store.delete(key)
        logger.info("Booking cancelled: %s at %s", existing.idx, key)
        return {
            "success": True,
            "booking": existing,
            "cancelled": True,
            "message": f"Booking {existing.idx} has been cancelled.",
        }

    def reschedule(self, date: DateLike, surveyor_id: SurveyorId, slot: str) -> BookingResult:
        """
        Move a booking to the next open slot on the same day.

        Scans forward from the current slot, wrapping to the start of the
        day. When no slot is open the booking is cancelled instead.
        """
        key = _slot_key(date, surveyor_id, slot)
        if key is None:
            return _failure(FailureReason.VALIDATION, f"{date!r} is not a valid date.")
        existing = self._store.get(key)
        try:
            next_state(state_of(existing), BookingEvent.RESCHEDULE)
        except InvalidTransitionError as exc:
            logger.debug("Reschedule ignored at %s: %s", key, exc)
            return _failure(FailureReason.PRECONDITION, str(exc), booking=existing)

        target = next(
            (
                candidate
                for candidate in slots_after(key.slot)
                if self.deriver.derive_status(surveyor_id, key.date, candidate) == SlotStatus.AVAILABLE
            ),
            None,
        )
        if target is None:
            self._store.delete(key)
            logger.info("No open slot for %s on %s; booking cancelled", existing.idx, key.date)
            return {
                "success": True,
                "booking": None,
                "cancelled": True,
                "message": f"No open slot on {key.date}. Booking {existing.idx} was cancelled.",
            }

        moved = existing.model_copy(
            update={
                "start_label": target,
                "end_label": next_hour(target),
                "time_slot": label_to_wire(target),
            }
        )
        # Remove-then-insert with no await in between; needs a lock if the
        # store is ever shared across threads.
        self._store.delete(key)
        self._store.insert(SlotKey.for_booking(moved), moved)
        logger.info("Booking rescheduled: %s from %s to %s", moved.idx, key.slot, target)
        return {
            "success": True,
            "booking": moved,
            "cancelled": False,
            "message": f"Booking {moved.idx} moved to {moved.slot_range}.",
        }

    # ------------------------------------------------------------------ #
    # Complete
    # ------------------------------------------------------------------ #

    async def complete(
        self,
        date: DateLike,
        surveyor_id: SurveyorId,
        slot: str,
        request: CompleteBookingRequest,
    ) -> BookingResult:
        """Mark a booking completed with remarks and photo proof."""
        if not request.is_complete:
            return _failure(FailureReason.VALIDATION, "Remarks and a photo are required.")

        key = _slot_key(date, surveyor_id, slot)
        if key is None:
            return _failure(FailureReason.VALIDATION, f"{date!r} is not a valid date.")

        async with self._lock:
            existing = self._store.get(key)
            try:
                next_state(state_of(existing), BookingEvent.COMPLETE)
            except InvalidTransitionError as exc:
                logger.debug("Complete ignored at %s: %s", key, exc)
                return _failure(FailureReason.PRECONDITION, str(exc), booking=existing)

            payload = UpstreamCompletePayload(
                survey_remarks=request.remarks,
                survey_photo_data_url=request.photo,
            )
            try:
                await self._client.complete_survey(existing.idx, payload)
            except UpstreamError as exc:
                logger.warning("Complete of %s failed upstream: %s", existing.idx, exc.detail)
                return _failure(
                    FailureReason.UPSTREAM,
                    exc.detail,
                    status_code=exc.status_code,
                    error=exc.body,
                    booking=existing,
                )

            current = self._store.get(key)
            if current is None or current.idx != existing.idx or current.is_completed:
                logger.error("Booking %s changed while completing upstream", existing.idx)
                return _failure(
                    FailureReason.PRECONDITION,
                    f"Booking {existing.idx} changed before completion was recorded.",
                    booking=current,
                )

            completed = current.model_copy(
                update={
                    "is_completed": True,
                    "survey_remarks": request.remarks,
                    "survey_photo": request.photo,
                }
            )
            self._store.insert(key, completed)

        logger.info("Booking completed: %s at %s", completed.idx, key)
        return {
            "success": True,
            "booking": completed,
            "message": "Survey marked as Completed.",
        }
