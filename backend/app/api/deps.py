"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from app.core.config import get_settings
from app.core.exceptions import AuthenticationError
from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.calendar_event_repository import ICalendarEventRepository
from app.interfaces.task_repository import ITaskRepository
from app.services.timeblock_service import TimeblockService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from app.infrastructure.local.task_repository import SqliteTaskRepository

    return SqliteTaskRepository()


@lru_cache()
def get_calendar_event_repository() -> ICalendarEventRepository:
    """Get calendar event repository instance."""
    from app.infrastructure.local.calendar_event_repository import SqliteCalendarEventRepository

    return SqliteCalendarEventRepository()


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get authentication provider instance."""
    from app.infrastructure.local.mock_auth import MockAuthProvider

    return MockAuthProvider(enabled=get_settings().AUTH_ENABLED)


def get_timeblock_service(
    task_repo: ITaskRepository = Depends(get_task_repository),
    event_repo: ICalendarEventRepository = Depends(get_calendar_event_repository),
) -> TimeblockService:
    """Get TimeblockService wired to the configured repositories."""
    return TimeblockService(task_repo=task_repo, event_repo=event_repo, settings=get_settings())


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    With auth disabled, returns the development user.
    """
    if not auth_provider.is_enabled():
        return User(id="dev_user", email="dev@example.com", display_name="Developer")

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
CalendarEventRepo = Annotated[ICalendarEventRepository, Depends(get_calendar_event_repository)]
TimeblockSvc = Annotated[TimeblockService, Depends(get_timeblock_service)]
CurrentUser = Annotated[User, Depends(get_current_user)]
