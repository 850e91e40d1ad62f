"""
Timeblock service: runs the scheduler against a user's persisted tasks.

Loads tasks and calendar events, treats blocks of tasks that are not being
rescheduled as busy time, invokes the pure SchedulerService and writes each
task's scheduled_blocks back. Runs for the same user are serialized so two
requests cannot both schedule into the same stale gap.
"""

from __future__ import annotations

import asyncio
import weakref
from datetime import date
from typing import Optional
from uuid import UUID

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    BusinessLogicError,
    InvalidScheduleInputError,
    NotFoundError,
    ValidationError,
)
from app.core.logger import setup_logger
from app.interfaces.calendar_event_repository import ICalendarEventRepository
from app.interfaces.task_repository import ITaskRepository
from app.models.enums import BalancedOrdering, HorizonPreset, SchedulingStrategy
from app.models.schedule import (
    BlockInput,
    ExistingEvent,
    RescheduleRequest,
    ScheduledBlock,
    ScheduleOptions,
    ScheduleRequest,
    ScheduleResult,
    ScheduleSettings,
    SchedulingStats,
)
from app.models.task import Task
from app.services.schedule_stats_service import compute_scheduling_stats
from app.services.scheduler_service import SchedulerService
from app.utils.datetime_utils import parse_time_to_minutes, resolve_horizon

logger = setup_logger(__name__)


class UserLockRegistry:
    """
    One asyncio.Lock per user id.

    Entries are weak: a lock is dropped once no caller holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


user_locks = UserLockRegistry()


def block_to_event(block: ScheduledBlock) -> ExistingEvent:
    return ExistingEvent(date=block.date, start_time=block.start_time, end_time=block.end_time)


class TimeblockService:
    """Calling layer around the scheduling engine."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        event_repo: ICalendarEventRepository,
        scheduler: Optional[SchedulerService] = None,
        settings: Optional[Settings] = None,
        locks: Optional[UserLockRegistry] = None,
    ):
        self.task_repo = task_repo
        self.event_repo = event_repo
        self.scheduler = scheduler or SchedulerService()
        self.settings = settings or get_settings()
        self.locks = locks or user_locks

    def build_settings(self, options: Optional[ScheduleOptions] = None) -> ScheduleSettings:
        """Merge request overrides over configured defaults."""
        config = self.settings
        return ScheduleSettings(
            working_hours_start=(options and options.working_hours_start)
            or config.SCHEDULER_DEFAULT_WORKING_HOURS_START,
            working_hours_end=(options and options.working_hours_end)
            or config.SCHEDULER_DEFAULT_WORKING_HOURS_END,
            strategy=(options and options.strategy)
            or SchedulingStrategy(config.SCHEDULER_DEFAULT_STRATEGY),
            balanced_ordering=BalancedOrdering(config.SCHEDULER_BALANCED_ORDERING),
            minimum_chunk_minutes=(options and options.minimum_chunk_minutes)
            or config.SCHEDULER_MIN_CHUNK_MINUTES,
        )

    def _check_horizon(self, start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise InvalidScheduleInputError(
                f"startDate {start_date} is after endDate {end_date}", field="horizon"
            )
        days = (end_date - start_date).days + 1
        if days > self.settings.SCHEDULER_MAX_HORIZON_DAYS:
            raise ValidationError(
                f"Horizon of {days} days exceeds the limit of "
                f"{self.settings.SCHEDULER_MAX_HORIZON_DAYS} days"
            )

    async def schedule(self, user_id: str, request: ScheduleRequest) -> ScheduleResult:
        """
        Schedule tasks over [request.start_date, request.end_date].

        Inline tasks produce a preview that is neither loaded against nor written
        to storage. Otherwise either the single task named by task_id or all of
        the user's incomplete tasks are rescheduled and persisted.
        """
        settings = self.build_settings(request)
        self._check_horizon(request.start_date, request.end_date)

        if request.tasks is not None:
            result = self.scheduler.schedule(
                request.tasks,
                settings,
                request.start_date,
                request.end_date,
                request.existing_events,
            )
            logger.info(
                f"Preview for {user_id}: {len(request.tasks)} tasks, "
                f"{len(result.blocks)} blocks, {len(result.partial)} partial, "
                f"{len(result.unscheduled)} unscheduled"
            )
            return result

        async with self.locks.get(user_id):
            tasks = await self.task_repo.list(user_id, include_completed=True, limit=10_000)
            targets = self._select_targets(tasks, request.task_id)
            target_ids = {task.id for task in targets}

            busy = list(request.existing_events)
            events = await self.event_repo.list_by_range(user_id, request.start_date, request.end_date)
            busy.extend(event.to_existing_event() for event in events)
            busy.extend(
                block_to_event(block)
                for task in tasks
                if task.id not in target_ids
                for block in task.scheduled_blocks
                if request.start_date <= block.date <= request.end_date
            )

            result = self.scheduler.schedule(
                [task.to_schedulable() for task in targets],
                settings,
                request.start_date,
                request.end_date,
                busy,
            )

            for task in targets:
                await self.task_repo.replace_scheduled_blocks(
                    user_id, task.id, result.by_task.get(str(task.id), [])
                )

        logger.info(
            f"Scheduled {len(targets)} tasks for {user_id} "
            f"({request.start_date}..{request.end_date}): {len(result.blocks)} blocks, "
            f"partial={result.partial}, unscheduled={result.unscheduled}"
        )
        if result.late:
            logger.warning(f"Tasks scheduled past their due date for {user_id}: {result.late}")
        return result

    async def schedule_preset(
        self,
        user_id: str,
        preset: HorizonPreset,
        options: Optional[ScheduleOptions] = None,
        today: Optional[date] = None,
    ) -> ScheduleResult:
        """Schedule over today or the current Monday-Sunday week."""
        options = options or ScheduleOptions()
        start_date, end_date = resolve_horizon(preset.value, today or date.today())
        request = ScheduleRequest(
            **options.model_dump(),
            start_date=start_date,
            end_date=end_date,
        )
        return await self.schedule(user_id, request)

    @staticmethod
    def _select_targets(tasks: list[Task], task_id: Optional[UUID]) -> list[Task]:
        if task_id is None:
            return [task for task in tasks if not task.completed]
        for task in tasks:
            if task.id == task_id:
                return [task]
        raise NotFoundError(f"Task {task_id} not found")

    async def list_blocks(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ScheduledBlock]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate must not be after endDate")
        return await self.task_repo.list_blocks(user_id, start_date, end_date)

    async def reschedule_task(
        self,
        user_id: str,
        task_id: UUID,
        request: RescheduleRequest,
    ) -> Task:
        """
        Replace a task's blocks with manually chosen ones.

        Blocks missing a task id are attributed to this task. The new blocks may
        not overlap each other, other tasks' blocks, or calendar events.
        """
        blocks = [self._parse_block_input(entry, str(task_id)) for entry in request.blocks]
        if request.working_hours_start or request.working_hours_end:
            self._check_within_working_hours(blocks, request)

        async with self.locks.get(user_id):
            task = await self.task_repo.get(user_id, task_id)
            if task is None:
                raise NotFoundError(f"Task {task_id} not found")

            occupied: list[tuple[date, int, int]] = []
            if blocks:
                first = min(block.date for block in blocks)
                last = max(block.date for block in blocks)
                for event in await self.event_repo.list_by_range(user_id, first, last):
                    occupied.append(
                        (
                            event.date,
                            parse_time_to_minutes(event.start_time),
                            parse_time_to_minutes(event.end_time, allow_end_of_day=True),
                        )
                    )
                other_tasks = await self.task_repo.list(user_id, include_completed=True, limit=10_000)
                occupied.extend(
                    (block.date, block.start_minute, block.end_minute)
                    for other in other_tasks
                    if other.id != task_id
                    for block in other.scheduled_blocks
                )
            self._check_no_overlap(blocks, occupied)

            updated = await self.task_repo.replace_scheduled_blocks(user_id, task_id, blocks)

        logger.info(f"Rescheduled task {task_id} for {user_id} into {len(blocks)} blocks")
        return updated

    @staticmethod
    def _parse_block_input(entry: BlockInput, task_id: str) -> ScheduledBlock:
        start = parse_time_to_minutes(entry.start_time)
        end = parse_time_to_minutes(entry.end_time, allow_end_of_day=True)
        if start is None or end is None:
            raise ValidationError("Block times must be HH:MM")
        if end <= start:
            raise ValidationError(f"Block on {entry.date} ends before it starts")
        if entry.task_id and entry.task_id != task_id:
            raise ValidationError(f"Block belongs to task {entry.task_id}, not {task_id}")
        return ScheduledBlock.create(task_id, entry.date, start, end - start)

    def _check_within_working_hours(
        self,
        blocks: list[ScheduledBlock],
        request: RescheduleRequest,
    ) -> None:
        settings = self.build_settings(
            ScheduleOptions(
                working_hours_start=request.working_hours_start,
                working_hours_end=request.working_hours_end,
            )
        )
        window_start = parse_time_to_minutes(settings.working_hours_start)
        window_end = parse_time_to_minutes(settings.working_hours_end, allow_end_of_day=True)
        if window_start is None or window_end is None or window_start >= window_end:
            raise InvalidScheduleInputError("Invalid working hours", field="working_hours")
        for block in blocks:
            if block.start_minute < window_start or block.end_minute > window_end:
                raise BusinessLogicError(
                    f"Block {block.date} {block.start_time}-{block.end_time} is outside working hours"
                )

    @staticmethod
    def _check_no_overlap(
        blocks: list[ScheduledBlock],
        occupied: list[tuple[date, int, int]],
    ) -> None:
        taken = list(occupied)
        for block in sorted(blocks, key=lambda item: (item.date, item.start_minute)):
            for day, start, end in taken:
                if day == block.date and block.start_minute < end and start < block.end_minute:
                    raise BusinessLogicError(
                        f"Block {block.date} {block.start_time}-{block.end_time} overlaps existing time"
                    )
            taken.append((block.date, block.start_minute, block.end_minute))

    async def get_stats(self, user_id: str) -> SchedulingStats:
        tasks = await self.task_repo.list(user_id, include_completed=True, limit=10_000)
        return compute_scheduling_stats(tasks)
