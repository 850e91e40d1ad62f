"""
Date and clock-time utilities.

Times of day travel as 24-hour "HH:MM" strings and are handled internally as
minute-of-day integers. "24:00" is accepted only where an end-of-day boundary
makes sense.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional

# UTC timezone constant
UTC = timezone.utc

MINUTES_PER_DAY = 24 * 60

# Zero-padded 24-hour clock, ASCII digits only.
_CLOCK_TIME = re.compile(r"(\d{2}):(\d{2})", re.ASCII)


def now_utc() -> datetime:
    """
    Get current UTC datetime (timezone-aware).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.
    """
    return datetime.now(UTC)


def parse_time_to_minutes(value: str, allow_end_of_day: bool = False) -> Optional[int]:
    """
    Parse "HH:MM" into minutes since midnight.

    Args:
        value: Clock time string
        allow_end_of_day: Accept "24:00" as 1440

    Returns:
        Minute-of-day, or None when the value is malformed
    """
    match = _CLOCK_TIME.fullmatch(value)
    if match is None:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2))
    if allow_end_of_day and hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minute-of-day as "HH:MM" (1440 renders as "24:00")."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date in [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def resolve_horizon(preset: str, today: date) -> tuple[date, date]:
    """
    Resolve a named horizon relative to today.

    "today" covers a single day; "week" covers Monday through Sunday of the week
    containing today.
    """
    if preset == "today":
        return today, today
    week_start = today - timedelta(days=today.weekday())
    return week_start, week_start + timedelta(days=6)
