"""
Schedule models: engine inputs, time blocks and scheduling results.

Field names are snake_case in Python and camelCase on the wire, matching the
shape persisted into a task's scheduled_blocks.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.models.enums import BalancedOrdering, Priority, SchedulingStrategy
from app.utils.datetime_utils import minutes_to_time


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable camelCase model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SchedulableTask(FrozenCamelModel):
    """Task snapshot consumed by the scheduling engine."""

    id: str
    priority: Priority = Priority.MEDIUM
    due_date: date
    start_date: Optional[date] = Field(None, description="Pins the first chunk to this date")
    start_time: Optional[str] = Field(None, description="Preferred HH:MM start of the first chunk")
    duration_minutes: Optional[int] = Field(None, description="Total minutes; <= 0 or None is not schedulable")
    chunk_size_minutes: Optional[int] = Field(None, description="Max contiguous minutes per block")
    completed: bool = False
    hard_deadline: bool = Field(False, description="Never place blocks after due_date")


class ScheduleSettings(FrozenCamelModel):
    """Working hours and ordering policy for one scheduling run."""

    working_hours_start: str = "09:00"
    working_hours_end: str = "17:00"
    strategy: SchedulingStrategy = SchedulingStrategy.BALANCED
    balanced_ordering: BalancedOrdering = BalancedOrdering.DEADLINE_THEN_PRIORITY
    minimum_chunk_minutes: int = 30


class ExistingEvent(FrozenCamelModel):
    """Immutable busy interval on a calendar date."""

    date: date
    start_time: str
    end_time: str


class ScheduledBlock(FrozenCamelModel):
    """A contiguous block of work placed for one task on one date."""

    date: date
    start_minute: int = Field(..., ge=0)
    duration_minutes: int = Field(..., gt=0)
    start_time: str
    end_time: str
    task_id: str

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    @classmethod
    def create(
        cls,
        task_id: str,
        block_date: date,
        start_minute: int,
        duration_minutes: int,
    ) -> "ScheduledBlock":
        return cls(
            date=block_date,
            start_minute=start_minute,
            duration_minutes=duration_minutes,
            start_time=minutes_to_time(start_minute),
            end_time=minutes_to_time(start_minute + duration_minutes),
            task_id=task_id,
        )


class ScheduleResult(CamelModel):
    """Aggregated output of a scheduling run."""

    by_date: dict[date, list[ScheduledBlock]] = Field(default_factory=dict)
    by_task: dict[str, list[ScheduledBlock]] = Field(default_factory=dict)
    unscheduled: list[str] = Field(default_factory=list)
    partial: list[str] = Field(default_factory=list)
    late: list[str] = Field(default_factory=list, description="Tasks with blocks after their due date")

    @property
    def blocks(self) -> list[ScheduledBlock]:
        return [block for day_blocks in self.by_date.values() for block in day_blocks]


# ===========================================
# API payloads
# ===========================================


class ScheduleOptions(CamelModel):
    """Per-run overrides shared by range and preset scheduling requests."""

    task_id: Optional[UUID] = Field(None, description="Reschedule only this persisted task")
    tasks: Optional[list[SchedulableTask]] = Field(
        None, description="Inline tasks; the result is returned but not persisted"
    )
    working_hours_start: Optional[str] = None
    working_hours_end: Optional[str] = None
    strategy: Optional[SchedulingStrategy] = None
    minimum_chunk_minutes: Optional[int] = Field(None, ge=1)
    existing_events: list[ExistingEvent] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_task_source(self) -> "ScheduleOptions":
        if self.task_id is not None and self.tasks is not None:
            raise ValueError("Provide either taskId or tasks, not both")
        return self


class ScheduleRequest(ScheduleOptions):
    """Schedule tasks over an explicit date range."""

    start_date: date
    end_date: date


class BlockInput(CamelModel):
    """Manually chosen block for a task."""

    date: date
    start_time: str
    end_time: str
    task_id: Optional[str] = None


class RescheduleRequest(CamelModel):
    """Replace a task's scheduled blocks."""

    blocks: list[BlockInput] = Field(default_factory=list)
    working_hours_start: Optional[str] = None
    working_hours_end: Optional[str] = None


class BlocksResponse(CamelModel):
    """Persisted blocks within a date range."""

    blocks: list[ScheduledBlock]
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TaskStats(CamelModel):
    total: int
    completed: int
    completion_rate: float


class SchedulingTotals(CamelModel):
    total_minutes_scheduled: int
    total_task_minutes: int
    scheduled_percentage: float
    daily_distribution: dict[date, int] = Field(default_factory=dict)


class SchedulingStats(CamelModel):
    """Completion and scheduling coverage for a user."""

    task_stats: TaskStats
    scheduling_stats: SchedulingTotals
