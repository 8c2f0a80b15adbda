"""
Client for the upstream survey API, the system of record for bookings.

Injects the configured ``Authorization`` token and normalizes every
failure into ``UpstreamError`` carrying the HTTP status and a structured
body: the upstream's own JSON when it sent JSON, otherwise a synthesized
``{"detail": ...}``.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from survey_calendar.config import settings
from survey_calendar.schemas.upstream_schema import (
    UpstreamCompletePayload,
    UpstreamCreatePayload,
    UpstreamSurvey,
    UpstreamSurveyList,
)

logger = logging.getLogger(__name__)

SURVEYS_PATH = "/api/survey/surveys/"
MISSING_CONFIG_DETAIL = "Missing UPSTREAM_BASE or UPSTREAM_TOKEN"


class UpstreamError(Exception):
    """A failed call to the upstream survey API."""

    def __init__(self, status_code: int, body: dict[str, Any]) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream error {status_code}: {self.detail}")

    @property
    def detail(self) -> str:
        detail = self.body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
        return str(self.body)


class UpstreamConfigError(UpstreamError):
    """Raised before any network call when credentials are missing."""

    def __init__(self) -> None:
        super().__init__(500, {"detail": MISSING_CONFIG_DETAIL})


def _safe_json(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.warning("Upstream sent invalid JSON with status %d", response.status_code)
    text = response.text
    return {"detail": text or f"Upstream returned non-JSON ({response.status_code})"}


def _as_error_body(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    return {"detail": data}


class UpstreamClient:
    """Async client for the survey list, create, and update endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.upstream.base_url).rstrip("/")
        self.token = token if token is not None else settings.upstream.token
        self.timeout = timeout if timeout is not None else settings.upstream.timeout_sec
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.token)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        if not self.configured:
            logger.error("Refusing %s %s: upstream is not configured", method, path)
            raise UpstreamConfigError()

        headers = {"Authorization": self.token}
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, params=params, json=json)
            except httpx.HTTPError as exc:
                logger.error("Upstream %s %s failed: %s", method, path, exc)
                raise UpstreamError(500, {"detail": str(exc) or "Unknown server error"}) from exc

        data = _safe_json(response)
        if not response.is_success:
            logger.warning("Upstream %s %s returned %d", method, path, response.status_code)
            raise UpstreamError(response.status_code, _as_error_body(data))
        return data

    async def fetch_surveys(self, page: int = 1) -> UpstreamSurveyList:
        """Fetch one page of existing survey bookings."""
        data = await self._request("GET", SURVEYS_PATH, params={"page": page})
        try:
            return UpstreamSurveyList.model_validate(data)
        except ValidationError as exc:
            raise UpstreamError(502, {"detail": f"Malformed survey list: {exc.error_count()} invalid fields"}) from exc

    async def fetch_all_surveys(self, max_pages: Optional[int] = None) -> list[UpstreamSurvey]:
        """Follow pagination until the last page or ``max_pages``."""
        limit = max_pages if max_pages is not None else settings.upstream.max_pages
        surveys: list[UpstreamSurvey] = []
        page = 1
        while page <= limit:
            listing = await self.fetch_surveys(page)
            surveys.extend(listing.results)
            last_page = listing.total_pages or page
            if page >= last_page and not listing.next_page_url:
                break
            page += 1
        logger.info("Fetched %d surveys from %d page(s)", len(surveys), min(page, limit))
        return surveys

    async def create_survey(self, payload: UpstreamCreatePayload) -> str:
        """Create a survey upstream and return its canonical ``idx``."""
        data = await self._request("POST", SURVEYS_PATH, json=payload.model_dump())
        idx = data.get("idx") if isinstance(data, dict) else None
        if not idx:
            raise UpstreamError(502, {"detail": "Upstream create response has no idx"})
        return str(idx)

    async def complete_survey(self, idx: str, payload: UpstreamCompletePayload) -> dict[str, Any]:
        """Mark survey ``idx`` completed upstream."""
        data = await self._request("PATCH", f"{SURVEYS_PATH}{idx}/", json=payload.model_dump())
        return data if isinstance(data, dict) else {}
