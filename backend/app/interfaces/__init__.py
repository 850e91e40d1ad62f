"""Abstract interfaces for infrastructure abstraction."""

from app.interfaces.auth_provider import IAuthProvider
from app.interfaces.calendar_event_repository import ICalendarEventRepository
from app.interfaces.task_repository import ITaskRepository

__all__ = [
    "ITaskRepository",
    "ICalendarEventRepository",
    "IAuthProvider",
]
