"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class SchedulerAppError(Exception):
    """Base exception for the timeblock scheduler."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(SchedulerAppError):
    """Resource not found."""

    pass


class ValidationError(SchedulerAppError):
    """Validation error."""

    pass


class InvalidScheduleInputError(ValidationError):
    """Scheduling input rejected before any allocation (caller bug)."""

    def __init__(self, message: str, field: Optional[str] = None, task_id: Optional[str] = None):
        details = {key: value for key, value in (("field", field), ("task_id", task_id)) if value}
        super().__init__(message, details=details or None)
        self.field = field
        self.task_id = task_id


class AuthenticationError(SchedulerAppError):
    """Authentication failed."""

    pass


class InfrastructureError(SchedulerAppError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class BusinessLogicError(SchedulerAppError):
    """Business logic constraint violation."""

    pass
