"""
CLI entry point: load the calendar from the upstream API and print a view.

Usage:
    python main.py day
    python main.py day --status available --region Central
    python main.py week --date 2024-06-10
    python main.py month --date 2024-06-01
"""

import argparse
import asyncio
import logging
import sys

from survey_calendar.config import settings
from survey_calendar.scheduling.aggregation import usage_bucket
from survey_calendar.scheduling.filters import RowFilter
from survey_calendar.scheduling.time_grid import DAY_TIMES
from survey_calendar.session import CalendarSession
from survey_calendar.utils import WEEK_DAY_NAMES

logger = logging.getLogger(__name__)


def _format_day(session: CalendarSession, row_filter: RowFilter) -> str:
    lines = [f"Day view: {session.current_day.isoformat()}"]
    header = f"{'Surveyor':<16}" + "".join(f"{t:>12}" for t in DAY_TIMES)
    lines.append(header)
    for row in session.day_rows(row_filter):
        cells = "".join(f"{row.slots[t].value:>12}" for t in DAY_TIMES)
        lines.append(f"{row.surveyor.name:<16}{cells}")
    return "\n".join(lines)


def _format_week(session: CalendarSession) -> str:
    usage = session.week_usage()
    lines = ["Week view: " + session.current_day.isoformat()]
    lines.append(f"{'Surveyor':<16}" + "".join(f"{d:>16}" for d in WEEK_DAY_NAMES))
    for surveyor in session.surveyors:
        if not surveyor.has_account:
            lines.append(f"{surveyor.name:<16}{'unavailable':>16}")
            continue
        cells = "".join(
            f"{f'{u.used}/{u.total} {usage_bucket(u.ratio)}':>16}"
            for u in usage[surveyor.booking_id].values()
        )
        lines.append(f"{surveyor.name:<16}{cells}")
    return "\n".join(lines)


def _format_month(session: CalendarSession) -> str:
    day = session.current_day
    lines = [f"Month view: {day.year}-{day.month:02d}"]
    for iso, density in sorted(session.month_density().items()):
        dots = " ".join(d.value for d in density.dots)
        lines.append(f"{iso}  {density.used}/{density.capacity}  {dots}")
    if len(lines) == 1:
        lines.append("No bookings this month.")
    return "\n".join(lines)


async def _run(args: argparse.Namespace) -> int:
    session = CalendarSession(today=args.date)
    await session.load()
    if session.load_error is not None:
        logger.error("Upstream error %d: %s", session.load_error.status_code, session.load_error.detail)
        return 1

    if args.view == "day":
        row_filter = RowFilter(
            region=args.region,
            state=args.state,
            status=args.status,
            surveyor=args.surveyor,
        )
        output = _format_day(session, row_filter)
    elif args.view == "week":
        output = _format_week(session)
    else:
        output = _format_month(session)
    sys.stdout.write(output + "\n")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Survey booking calendar.")
    parser.add_argument("view", choices=["day", "week", "month"], help="Calendar view to print.")
    parser.add_argument("--date", type=str, default=None, help="Day to view (YYYY-MM-DD, default: today).")
    parser.add_argument("--region", type=str, default="All Regions")
    parser.add_argument("--state", type=str, default="All States")
    parser.add_argument("--status", type=str, default="All Status")
    parser.add_argument("--surveyor", type=str, default="", help="Surveyor name search.")
    args = parser.parse_args()

    logger.debug("Upstream configured: %s", settings.upstream.configured)
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
