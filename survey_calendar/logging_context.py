"""
Session correlation for calendar logs.

A ``CalendarSession`` binds its id into a context variable. The handler
built here stamps that id on every record reaching the root logger, so
lines from the store, the upstream client and httpx all name the session
they belong to:

    2024-06-10 09:00:00 [CAL-1a2b3c] [survey_calendar.session] INFO: Session loaded: ...
"""

import logging
from contextvars import ContextVar
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s [%(session_id)s] [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NO_SESSION = "-"

_current_session: ContextVar[str] = ContextVar("calendar_session", default=NO_SESSION)


def bind_session(session_id: str) -> None:
    _current_session.set(session_id)


def current_session() -> str:
    return _current_session.get()


class SessionStamp(logging.Filter):
    """Adds ``session_id`` to records that do not already carry one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _current_session.get()  # type: ignore[attr-defined]
        return True


def session_handler(stream: Optional[IO[str]] = None) -> logging.Handler:
    """Stream handler whose format includes the bound session id."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(SessionStamp())
    return handler


def configure_logging(level: str) -> None:
    """Install the session-aware handler on the root logger.

    Leaves logging alone when the root logger already has handlers, e.g.
    when an embedding application or test runner configured it first.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[session_handler()],
    )
