"""Pydantic models (schemas) for the application."""

from app.models.enums import BalancedOrdering, HorizonPreset, Priority, SchedulingStrategy
from app.models.schedule import (
    ExistingEvent,
    SchedulableTask,
    ScheduledBlock,
    ScheduleResult,
    ScheduleSettings,
)
from app.models.task import Task, TaskCreate, TaskUpdate
from app.models.event import CalendarEvent, CalendarEventCreate

__all__ = [
    # Enums
    "Priority",
    "SchedulingStrategy",
    "BalancedOrdering",
    "HorizonPreset",
    # Scheduling
    "SchedulableTask",
    "ScheduleSettings",
    "ExistingEvent",
    "ScheduledBlock",
    "ScheduleResult",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    # Event
    "CalendarEvent",
    "CalendarEventCreate",
]
