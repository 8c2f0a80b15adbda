"""Shared date utilities used across the calendar engine."""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, str]

WEEK_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def to_iso_date(value: DateLike) -> str:
    """Normalize a date or ISO string to ``YYYY-MM-DD``.

    Examples:
        >>> to_iso_date(date(2024, 6, 10))
        '2024-06-10'
        >>> to_iso_date(" 2024-06-10 ")
        '2024-06-10'
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()


def parse_iso_date(value: DateLike) -> date:
    return date.fromisoformat(to_iso_date(value))


def start_of_week(value: DateLike) -> date:
    """Return the Monday of the week containing ``value``."""
    day = parse_iso_date(value)
    return day - timedelta(days=day.weekday())


def week_dates(value: DateLike) -> list[str]:
    """Return the Monday..Saturday ISO dates of the week containing ``value``."""
    monday = start_of_week(value)
    return [(monday + timedelta(days=i)).isoformat() for i in range(len(WEEK_DAY_NAMES))]


def month_dates(year: int, month: int) -> list[str]:
    """Return every ISO date in the given calendar month."""
    _, last = calendar.monthrange(year, month)
    return [date(year, month, d).isoformat() for d in range(1, last + 1)]
