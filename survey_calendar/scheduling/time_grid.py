"""
Fixed daily time grid and 12-hour / 24-hour slot conversions.

The bookable day is eight contiguous one-hour slots from 9:00 AM to
4:00 PM. Upstream records carry slots as ``"HH:MM-HH:MM"`` in 24-hour
time while the grid is keyed by 12-hour start labels.

Every conversion here feeds rendering of upstream data and therefore
never raises: malformed input is returned unchanged, except
``from_am_pm`` which falls back to ``DEFAULT_WIRE_START``.

Usage:
    label_to_wire("10:00 AM")          # "10:00-11:00"
    wire_to_labels("13:00-14:00")      # ("1:00 PM", "2:00 PM")
    next_hour("11:00 AM")              # "12:00 PM"
"""

import logging
import re

logger = logging.getLogger(__name__)

DAY_TIMES: tuple[str, ...] = (
    "9:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "1:00 PM",
    "2:00 PM",
    "3:00 PM",
    "4:00 PM",
)

DEFAULT_WIRE_START = "10:00"

_LABEL_RE = re.compile(r"^(\d{1,2}):(\d{2})\s(AM|PM)$")
_WIRE_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def next_hour(label: str) -> str:
    """Return the 12-hour label one hour after ``label``."""
    m = _LABEL_RE.match(label)
    if not m:
        return label
    hour = int(m.group(1)) + 1
    minute = m.group(2)
    meridiem = m.group(3)

    if hour == 12:
        meridiem = "PM" if meridiem == "AM" else "AM"
    elif hour == 13:
        hour = 1
    return f"{hour}:{minute} {meridiem}"


def to_am_pm(hhmm: str) -> str:
    """Convert ``"HH:MM"`` to a 12-hour label, e.g. ``"13:00"`` -> ``"1:00 PM"``."""
    m = _WIRE_RE.match(hhmm.strip())
    if not m:
        return hhmm
    hour = int(m.group(1))
    if hour > 23:
        return hhmm
    meridiem = "PM" if hour >= 12 else "AM"
    if hour == 0:
        hour = 12
    elif hour > 12:
        hour -= 12
    return f"{hour}:{m.group(2)} {meridiem}"


def from_am_pm(label: str) -> str:
    """Convert a 12-hour label to ``"HH:MM"``; unparseable labels give ``DEFAULT_WIRE_START``."""
    m = _LABEL_RE.match(label.strip())
    if not m:
        return DEFAULT_WIRE_START
    hour = int(m.group(1))
    if m.group(3) == "AM":
        if hour == 12:
            hour = 0
    elif hour != 12:
        hour += 12
    return f"{hour:02d}:{m.group(2)}"


def _add_hour_24(hhmm: str) -> str:
    hour_str, _, minute = hhmm.partition(":")
    return f"{(int(hour_str) + 1) % 24:02d}:{minute or '00'}"


def label_to_wire(label: str) -> str:
    """``"10:00 AM"`` -> ``"10:00-11:00"``."""
    start = from_am_pm(label)
    return f"{start}-{_add_hour_24(start)}"


def wire_to_labels(wire: str) -> tuple[str, str]:
    """``"10:00-11:00"`` -> ``("10:00 AM", "11:00 AM")``.

    A wire value without an end time gets the next-hour label as its end.
    """
    start_raw, sep, end_raw = wire.partition("-")
    start = to_am_pm(start_raw.strip())
    if not sep or not end_raw.strip():
        return start, next_hour(start)
    return start, to_am_pm(end_raw.strip())


def is_grid_slot(label: str) -> bool:
    return label in DAY_TIMES


def slot_index(label: str) -> int:
    """Position of ``label`` in the day, or -1 when it is not a grid slot."""
    try:
        return DAY_TIMES.index(label)
    except ValueError:
        return -1


def slot_range_label(label: str) -> str:
    return f"{label} - {next_hour(label)}"


def slots_after(label: str) -> list[str]:
    """Every other slot in forward scan order, wrapping to the start of the day."""
    idx = slot_index(label)
    if idx < 0:
        return list(DAY_TIMES)
    return [DAY_TIMES[(idx + step) % len(DAY_TIMES)] for step in range(1, len(DAY_TIMES))]
