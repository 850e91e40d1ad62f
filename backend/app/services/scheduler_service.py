"""
Scheduler service for task-to-timeblock scheduling.

A pure, synchronous computation: tasks plus a busy-calendar snapshot in,
non-overlapping time blocks out. No I/O and no state survives a call.
"""

from datetime import date
from typing import Optional, Sequence

from app.core.exceptions import InvalidScheduleInputError
from app.models.schedule import (
    ExistingEvent,
    SchedulableTask,
    ScheduleResult,
    ScheduleSettings,
)
from app.services.block_allocator import BlockAllocator
from app.services.calendar_model import CalendarModel
from app.services.schedule_aggregator import ScheduleAggregator
from app.services.task_queue_builder import build_task_queue
from app.utils.datetime_utils import parse_time_to_minutes


def _parse_clock(value: str, field: str, allow_end_of_day: bool = False) -> int:
    minutes = parse_time_to_minutes(value, allow_end_of_day=allow_end_of_day)
    if minutes is None:
        raise InvalidScheduleInputError(f"{field} must be HH:MM, got {value!r}", field=field)
    return minutes


class SchedulerService:
    """
    Single-pass, priority-ordered greedy placement of tasks into time blocks.

    Provides:
    - Input validation (whole call rejected before any allocation)
    - Pinned-first, strategy-ordered allocation across a bounded day horizon
    - By-date and by-task groupings plus partial/unscheduled reporting
    """

    def schedule(
        self,
        tasks: Sequence[SchedulableTask],
        settings: ScheduleSettings,
        horizon_start: date,
        horizon_end: date,
        existing_events: Optional[Sequence[ExistingEvent]] = None,
    ) -> ScheduleResult:
        """
        Schedule tasks into time blocks within [horizon_start, horizon_end].

        Args:
            tasks: Task snapshots; completed or unestimated tasks are skipped
            settings: Working hours, strategy and chunk floor
            horizon_start: First date blocks may be placed on
            horizon_end: Last date blocks may be placed on (inclusive)
            existing_events: Fixed busy intervals that blocks must avoid

        Returns:
            ScheduleResult with by_date/by_task groupings and the ids of tasks
            that could only be partially placed or not placed at all.

        Raises:
            InvalidScheduleInputError: If any input indicates a caller bug
        """
        existing_events = list(existing_events or [])
        window_start, window_end = self._validate_settings(settings)
        if horizon_start > horizon_end:
            raise InvalidScheduleInputError(
                f"horizon start {horizon_start} is after horizon end {horizon_end}",
                field="horizon",
            )
        for task in tasks:
            self._validate_task(task)
        parsed_events = [self._parse_event(event) for event in existing_events]

        calendar = CalendarModel.build(
            horizon_start, horizon_end, window_start, window_end, parsed_events
        )
        queue = build_task_queue(tasks, settings.strategy, settings.balanced_ordering)
        allocator = BlockAllocator(calendar, settings.minimum_chunk_minutes)

        aggregator = ScheduleAggregator()
        aggregator.extend(allocator.allocate(queue))
        return aggregator.result()

    @staticmethod
    def _validate_settings(settings: ScheduleSettings) -> tuple[int, int]:
        start = _parse_clock(settings.working_hours_start, "working_hours_start")
        end = _parse_clock(settings.working_hours_end, "working_hours_end", allow_end_of_day=True)
        if start >= end:
            raise InvalidScheduleInputError(
                "working_hours_start must be before working_hours_end",
                field="working_hours",
            )
        if settings.minimum_chunk_minutes < 1:
            raise InvalidScheduleInputError(
                "minimum_chunk_minutes must be at least 1",
                field="minimum_chunk_minutes",
            )
        return start, end

    @staticmethod
    def _validate_task(task: SchedulableTask) -> None:
        if task.completed:
            return
        duration = task.duration_minutes
        if duration is not None and duration < 0:
            raise InvalidScheduleInputError(
                f"task {task.id} has a negative duration",
                field="duration_minutes",
                task_id=task.id,
            )
        if task.chunk_size_minutes is not None:
            if task.chunk_size_minutes <= 0:
                raise InvalidScheduleInputError(
                    f"task {task.id} has a non-positive chunk size",
                    field="chunk_size_minutes",
                    task_id=task.id,
                )
            if duration and task.chunk_size_minutes > duration:
                raise InvalidScheduleInputError(
                    f"task {task.id} chunk size exceeds its duration",
                    field="chunk_size_minutes",
                    task_id=task.id,
                )
        if task.start_time is not None and parse_time_to_minutes(task.start_time) is None:
            raise InvalidScheduleInputError(
                f"task {task.id} start_time must be HH:MM",
                field="start_time",
                task_id=task.id,
            )

    @staticmethod
    def _parse_event(event: ExistingEvent) -> tuple[ExistingEvent, int, int]:
        start = _parse_clock(event.start_time, "existing_events.start_time")
        end = _parse_clock(event.end_time, "existing_events.end_time", allow_end_of_day=True)
        if end <= start:
            raise InvalidScheduleInputError(
                f"event on {event.date} ends before it starts",
                field="existing_events",
            )
        return event, start, end
