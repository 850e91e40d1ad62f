"""
Greedy allocation of task chunks onto the calendar horizon.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from app.models.schedule import SchedulableTask, ScheduledBlock
from app.services.calendar_model import CalendarModel, IntervalKind, OccupiedInterval
from app.services.slot_finder import find_slot
from app.utils.datetime_utils import parse_time_to_minutes


@dataclass
class TaskAllocation:
    """Blocks placed for one task and the minutes still unplaced."""

    task: SchedulableTask
    blocks: list[ScheduledBlock] = field(default_factory=list)
    remaining_minutes: int = 0

    @property
    def placed_minutes(self) -> int:
        return sum(block.duration_minutes for block in self.blocks)

    @property
    def is_unscheduled(self) -> bool:
        return not self.blocks

    @property
    def is_partial(self) -> bool:
        return bool(self.blocks) and self.remaining_minutes > 0

    @property
    def is_late(self) -> bool:
        return any(block.date > self.task.due_date for block in self.blocks)


class BlockAllocator:
    """
    Places each queued task into the earliest usable gaps of the horizon.

    The calendar is mutated in place: every placed block becomes an occupied
    interval that later tasks must work around.
    """

    def __init__(self, calendar: CalendarModel, minimum_chunk_minutes: int = 30):
        self.calendar = calendar
        self.minimum_chunk_minutes = minimum_chunk_minutes

    def allocate(self, queue: Iterable[SchedulableTask]) -> list[TaskAllocation]:
        return [self.allocate_task(task) for task in queue]

    def allocate_task(self, task: SchedulableTask) -> TaskAllocation:
        remaining = task.duration_minutes or 0
        chunk = task.chunk_size_minutes or remaining
        allocation = TaskAllocation(task=task, remaining_minutes=remaining)

        cursor = task.start_date or self.calendar.horizon_start
        pinned_minute: Optional[int] = (
            parse_time_to_minutes(task.start_time) if task.start_time else None
        )
        if cursor < self.calendar.horizon_start:
            # The pinned date has already passed; place from the horizon start.
            cursor = self.calendar.horizon_start
            pinned_minute = None

        last_date: date = self.calendar.horizon_end
        if task.hard_deadline:
            last_date = min(last_date, task.due_date)

        while remaining > 0 and cursor <= last_date:
            day = self.calendar[cursor]
            want = min(remaining, chunk)
            gap = find_slot(day, pinned_minute, want)

            if gap is not None and gap.duration_minutes >= min(self.minimum_chunk_minutes, want):
                placed = min(want, gap.duration_minutes, remaining)
                block = ScheduledBlock.create(task.id, cursor, gap.start_minute, placed)
                day.occupy(
                    OccupiedInterval(
                        start_minute=block.start_minute,
                        end_minute=block.end_minute,
                        kind=IntervalKind.BLOCK,
                        task_id=task.id,
                    )
                )
                allocation.blocks.append(block)
                remaining -= placed
                pinned_minute = None
            else:
                cursor += timedelta(days=1)
                pinned_minute = None

        allocation.remaining_minutes = remaining
        return allocation
