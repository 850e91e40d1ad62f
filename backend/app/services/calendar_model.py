"""
Per-day capacity model for a scheduling horizon.

Each CalendarDay owns the working-hour window for one date and the intervals
already occupied on it (fixed events and blocks placed during the run).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from app.models.schedule import ExistingEvent
from app.utils.datetime_utils import iter_dates


class IntervalKind(str, Enum):
    """Origin of an occupied interval."""

    EVENT = "event"  # fixed commitment, never rescheduled
    BLOCK = "block"  # placed by the allocator in this run


@dataclass(frozen=True)
class OccupiedInterval:
    start_minute: int
    end_minute: int
    kind: IntervalKind
    task_id: Optional[str] = None


@dataclass(frozen=True)
class TimeInterval:
    start_minutes: int
    end_minutes: int


def merge_intervals(intervals: Iterable[TimeInterval]) -> list[TimeInterval]:
    """Merge overlapping or touching intervals, sorted by start."""
    merged: list[TimeInterval] = []
    for interval in sorted(intervals, key=lambda item: (item.start_minutes, item.end_minutes)):
        if merged and interval.start_minutes <= merged[-1].end_minutes:
            last = merged[-1]
            merged[-1] = TimeInterval(last.start_minutes, max(last.end_minutes, interval.end_minutes))
        else:
            merged.append(interval)
    return merged


@dataclass
class CalendarDay:
    """Working window and occupied intervals for a single date."""

    date: date
    window_start: int
    window_end: int
    occupied: list[OccupiedInterval] = field(default_factory=list)

    @property
    def window_minutes(self) -> int:
        return self.window_end - self.window_start

    def occupy(self, interval: OccupiedInterval) -> None:
        """Record an occupied interval, keeping the list sorted by start."""
        self.occupied.append(interval)
        self.occupied.sort(key=lambda item: (item.start_minute, item.end_minute))

    def busy_intervals(self) -> list[TimeInterval]:
        """Occupied time merged and clipped to the working window."""
        clipped = [
            TimeInterval(max(item.start_minute, self.window_start), min(item.end_minute, self.window_end))
            for item in self.occupied
            if item.end_minute > self.window_start and item.start_minute < self.window_end
        ]
        return merge_intervals(clipped)

    @property
    def remaining_capacity(self) -> int:
        busy = sum(interval.end_minutes - interval.start_minutes for interval in self.busy_intervals())
        return self.window_minutes - busy


class CalendarModel:
    """Arena of CalendarDay structs indexed by date."""

    def __init__(self, horizon_start: date, horizon_end: date, window_start: int, window_end: int):
        self.horizon_start = horizon_start
        self.horizon_end = horizon_end
        self._days: dict[date, CalendarDay] = {
            day: CalendarDay(date=day, window_start=window_start, window_end=window_end)
            for day in iter_dates(horizon_start, horizon_end)
        }

    @classmethod
    def build(
        cls,
        horizon_start: date,
        horizon_end: date,
        window_start: int,
        window_end: int,
        events: Iterable[tuple[ExistingEvent, int, int]],
    ) -> "CalendarModel":
        """
        Create the horizon and seed it with fixed events.

        Args:
            events: (event, start_minute, end_minute) triples with parsed times.
                Events dated outside the horizon are ignored.
        """
        model = cls(horizon_start, horizon_end, window_start, window_end)
        for event, start_minute, end_minute in events:
            day = model.get(event.date)
            if day is None:
                continue
            day.occupy(OccupiedInterval(start_minute, end_minute, IntervalKind.EVENT))
        return model

    def get(self, day: date) -> Optional[CalendarDay]:
        return self._days.get(day)

    def __getitem__(self, day: date) -> CalendarDay:
        return self._days[day]
