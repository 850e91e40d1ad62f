"""
Free-gap queries over a CalendarDay.

Placement is first-fit: the earliest gap that can hold the requested minutes
wins. When no gap is large enough the largest one is offered so the caller can
decide whether a shortened chunk is still worth placing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.services.calendar_model import CalendarDay


@dataclass(frozen=True)
class Gap:
    start_minute: int
    duration_minutes: int

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes


def free_gaps(day: CalendarDay) -> list[Gap]:
    """Free time inside the working window, sorted ascending by start."""
    gaps: list[Gap] = []
    cursor = day.window_start
    for busy in day.busy_intervals():
        if busy.start_minutes > cursor:
            gaps.append(Gap(cursor, busy.start_minutes - cursor))
        cursor = max(cursor, busy.end_minutes)
    if cursor < day.window_end:
        gaps.append(Gap(cursor, day.window_end - cursor))
    return gaps


def find_slot(
    day: CalendarDay,
    desired_start_minute: Optional[int],
    needed_minutes: int,
) -> Optional[Gap]:
    """
    Find where the next chunk should go on this day.

    Args:
        day: Calendar day to search
        desired_start_minute: Exact start requested by a pin (None for first-fit)
        needed_minutes: Minutes the chunk would like to occupy

    Returns:
        A gap starting at the chosen minute, or None if the day is full.
        The returned gap may be shorter than needed_minutes.
    """
    gaps = free_gaps(day)
    if not gaps:
        return None

    if desired_start_minute is not None:
        for gap in gaps:
            if gap.start_minute <= desired_start_minute and desired_start_minute + needed_minutes <= gap.end_minute:
                return Gap(desired_start_minute, gap.end_minute - desired_start_minute)

    for gap in gaps:
        if gap.duration_minutes >= needed_minutes:
            return gap

    # max() keeps the first of equal candidates, so ties go to the earliest gap.
    return max(gaps, key=lambda gap: gap.duration_minutes)
