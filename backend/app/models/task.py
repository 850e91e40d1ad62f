"""
Task model definitions.

Tasks are the pending work items that the scheduler turns into time blocks.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.models.enums import Priority
from app.models.schedule import ScheduledBlock, SchedulableTask
from app.utils.datetime_utils import parse_time_to_minutes

NON_NULLABLE_FIELDS = frozenset({"title", "priority", "due_date", "hard_deadline", "completed"})


class TaskBase(BaseModel):
    """Base task fields shared across create/read."""

    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    description: Optional[str] = Field(None, max_length=2000)
    priority: Priority = Field(Priority.MEDIUM, description="high / medium / low")
    due_date: date = Field(..., description="Due date")
    start_date: Optional[date] = Field(None, description="Pinned start date")
    start_time: Optional[str] = Field(None, description="Pinned start time (HH:MM)")
    duration_minutes: Optional[int] = Field(None, ge=1, description="Estimated minutes")
    chunk_size_minutes: Optional[int] = Field(None, ge=1, description="Max minutes per block")
    hard_deadline: bool = Field(False, description="Blocks must not land after due_date")

    @model_validator(mode="after")
    def validate_schedule_fields(self):
        if self.start_time is not None and parse_time_to_minutes(self.start_time) is None:
            raise ValueError("start_time must be HH:MM")
        if (
            self.chunk_size_minutes is not None
            and self.duration_minutes is not None
            and self.chunk_size_minutes > self.duration_minutes
        ):
            raise ValueError("chunk_size_minutes cannot exceed duration_minutes")
        return self


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    pass


class TaskUpdate(BaseModel):
    """Schema for updating an existing task. All fields optional."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    chunk_size_minutes: Optional[int] = Field(None, ge=1)
    hard_deadline: Optional[bool] = None
    completed: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        # Omitted fields stay unchanged; these columns never hold null.
        nulled = sorted(
            name
            for name in self.model_fields_set & NON_NULLABLE_FIELDS
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class Task(TaskBase):
    """Complete task model with all fields."""

    id: UUID
    user_id: str
    completed: bool = False
    scheduled_blocks: list[ScheduledBlock] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @property
    def scheduled_minutes(self) -> int:
        return sum(block.duration_minutes for block in self.scheduled_blocks)

    def to_schedulable(self) -> SchedulableTask:
        """Snapshot the scheduling-relevant fields for the engine."""
        return SchedulableTask(
            id=str(self.id),
            priority=self.priority,
            due_date=self.due_date,
            start_date=self.start_date,
            start_time=self.start_time,
            duration_minutes=self.duration_minutes,
            chunk_size_minutes=self.chunk_size_minutes,
            completed=self.completed,
            hard_deadline=self.hard_deadline,
        )
