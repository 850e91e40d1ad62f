"""
Build the ordered allocation queue from raw tasks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable

from app.models.enums import PRIORITY_RANK, BalancedOrdering, SchedulingStrategy
from app.models.schedule import SchedulableTask
from app.utils.datetime_utils import parse_time_to_minutes

SortKey = Callable[[tuple[int, SchedulableTask]], tuple]


@dataclass
class TaskQueue:
    """Schedulable tasks split by whether a start date is pinned."""

    pinned: list[SchedulableTask] = field(default_factory=list)
    unpinned: list[SchedulableTask] = field(default_factory=list)

    def __iter__(self):
        # Pinned intent is placed before flexible tasks can crowd it out.
        yield from self.pinned
        yield from self.unpinned

    def __len__(self) -> int:
        return len(self.pinned) + len(self.unpinned)


def is_schedulable(task: SchedulableTask) -> bool:
    return not task.completed and task.duration_minutes is not None and task.duration_minutes > 0


def _priority_rank(task: SchedulableTask) -> int:
    return PRIORITY_RANK[task.priority]


def _unpinned_sort_key(
    strategy: SchedulingStrategy,
    balanced_ordering: BalancedOrdering,
) -> SortKey:
    priority_leads = strategy == SchedulingStrategy.PRIORITY_FIRST or (
        strategy == SchedulingStrategy.BALANCED
        and balanced_ordering == BalancedOrdering.PRIORITY_THEN_DEADLINE
    )
    if priority_leads:
        return lambda item: (_priority_rank(item[1]), item[1].due_date, item[0])
    return lambda item: (item[1].due_date, _priority_rank(item[1]), item[0])


def _pinned_sort_key(item: tuple[int, SchedulableTask]) -> tuple[date, int, int]:
    index, task = item
    start_minute = parse_time_to_minutes(task.start_time) if task.start_time else None
    # Date-only pins sort ahead of timed pins on the same day.
    return (task.start_date or date.min, -1 if start_minute is None else start_minute, index)


def build_task_queue(
    tasks: Iterable[SchedulableTask],
    strategy: SchedulingStrategy = SchedulingStrategy.BALANCED,
    balanced_ordering: BalancedOrdering = BalancedOrdering.DEADLINE_THEN_PRIORITY,
) -> TaskQueue:
    """
    Filter and order tasks for allocation.

    Completed tasks and tasks without a positive duration are dropped. Tasks with
    a start date are ordered by their pin; the rest follow the strategy. Insertion
    order breaks every remaining tie.
    """
    indexed = [(index, task) for index, task in enumerate(tasks) if is_schedulable(task)]
    pinned = [item for item in indexed if item[1].start_date is not None]
    unpinned = [item for item in indexed if item[1].start_date is None]

    pinned.sort(key=_pinned_sort_key)
    unpinned.sort(key=_unpinned_sort_key(strategy, balanced_ordering))

    return TaskQueue(
        pinned=[task for _, task in pinned],
        unpinned=[task for _, task in unpinned],
    )
