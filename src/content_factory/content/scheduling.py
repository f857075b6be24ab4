"""Posting-time arithmetic used by the scheduler agent."""

from __future__ import annotations

import re

from content_factory.content.platforms import PLATFORM_OPTIMAL_TIMES

_TIME_RE = re.compile(r"(\d+):?(\d*)\s*(AM|PM)?", re.IGNORECASE)


def parse_time_to_minutes(time_str: str) -> int:
    """Parse ``"7:00 PM"``, ``"7pm"`` or ``"19:30"`` into minutes since midnight.

    Unparseable strings map to 0.
    """
    match = _TIME_RE.search(time_str or "")
    if not match:
        return 0

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = (match.group(3) or "").upper()

    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + minutes


def minutes_to_time_string(mins: int) -> str:
    """Format minutes since midnight as ``"h:mm AM"``, wrapping past midnight."""
    total = mins % 1440
    hours, minutes = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    if hours == 0:
        hours = 12
    elif hours > 12:
        hours -= 12
    return f"{hours}:{minutes:02d} {period}"


def slot_key(day: str, time_str: str) -> tuple[str, int]:
    return day, parse_time_to_minutes(time_str)


def get_optimal_time_for_platform(platform: str, day: str) -> str:
    """Best posting time for *platform* on *day*.

    On one of the platform's best days this is its top time; otherwise the
    middle entry, which tends to work across days.
    """
    data = PLATFORM_OPTIMAL_TIMES.get(platform)
    if data is None:
        return "12:00 PM"
    times = data["best_times"]
    if day in data["best_days"]:
        return times[0]
    return times[len(times) // 2]
