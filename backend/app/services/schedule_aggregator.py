"""
Regroup allocated blocks for display (by date) and persistence (by task).
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable

from app.models.schedule import ScheduledBlock, ScheduleResult
from app.services.block_allocator import TaskAllocation


class ScheduleAggregator:
    """Collects task allocations and exposes the result groupings."""

    def __init__(self) -> None:
        self._allocations: list[TaskAllocation] = []

    def add(self, allocation: TaskAllocation) -> None:
        self._allocations.append(allocation)

    def extend(self, allocations: Iterable[TaskAllocation]) -> None:
        for allocation in allocations:
            self.add(allocation)

    def by_date(self) -> dict[date, list[ScheduledBlock]]:
        grouped: dict[date, list[ScheduledBlock]] = defaultdict(list)
        for allocation in self._allocations:
            for block in allocation.blocks:
                grouped[block.date].append(block)
        return {
            day: sorted(grouped[day], key=lambda block: block.start_minute)
            for day in sorted(grouped)
        }

    def by_task(self) -> dict[str, list[ScheduledBlock]]:
        return {
            allocation.task.id: sorted(
                allocation.blocks, key=lambda block: (block.date, block.start_minute)
            )
            for allocation in self._allocations
            if allocation.blocks
        }

    def unscheduled(self) -> list[str]:
        return [allocation.task.id for allocation in self._allocations if allocation.is_unscheduled]

    def partial(self) -> list[str]:
        return [allocation.task.id for allocation in self._allocations if allocation.is_partial]

    def late(self) -> list[str]:
        return [allocation.task.id for allocation in self._allocations if allocation.is_late]

    def result(self) -> ScheduleResult:
        return ScheduleResult(
            by_date=self.by_date(),
            by_task=self.by_task(),
            unscheduled=self.unscheduled(),
            partial=self.partial(),
            late=self.late(),
        )
