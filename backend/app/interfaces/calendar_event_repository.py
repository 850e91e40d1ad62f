"""
Calendar event repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from app.models.event import CalendarEvent, CalendarEventCreate


class ICalendarEventRepository(ABC):
    """Abstract interface for fixed calendar events."""

    @abstractmethod
    async def create(self, user_id: str, event: CalendarEventCreate) -> CalendarEvent:
        pass

    @abstractmethod
    async def list_by_range(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> list[CalendarEvent]:
        """Events dated within [start_date, end_date], ordered by date and start time."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, event_id: UUID) -> bool:
        pass
