"""
SQLite implementation of calendar event repository.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID, uuid4

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError
from app.infrastructure.local.database import CalendarEventORM, get_session_factory
from app.interfaces.calendar_event_repository import ICalendarEventRepository
from app.models.event import CalendarEvent, CalendarEventCreate


class SqliteCalendarEventRepository(ICalendarEventRepository):
    """SQLite implementation of calendar event repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: CalendarEventORM) -> CalendarEvent:
        return CalendarEvent(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            date=orm.date,
            start_time=orm.start_time,
            end_time=orm.end_time,
            created_at=orm.created_at,
        )

    async def create(self, user_id: str, event: CalendarEventCreate) -> CalendarEvent:
        try:
            async with self._session_factory() as session:
                orm = CalendarEventORM(
                    id=str(uuid4()),
                    user_id=user_id,
                    title=event.title,
                    date=event.date,
                    start_time=event.start_time,
                    end_time=event.end_time,
                )
                session.add(orm)
                await session.commit()
                await session.refresh(orm)
                return self._orm_to_model(orm)
        except SQLAlchemyError as exc:
            raise InfrastructureError("Failed to create calendar event", details=str(exc)) from exc

    async def list_by_range(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
    ) -> list[CalendarEvent]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CalendarEventORM)
                .where(
                    and_(
                        CalendarEventORM.user_id == user_id,
                        CalendarEventORM.date >= start_date,
                        CalendarEventORM.date <= end_date,
                    )
                )
                .order_by(CalendarEventORM.date.asc(), CalendarEventORM.start_time.asc())
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def delete(self, user_id: str, event_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CalendarEventORM).where(
                    and_(CalendarEventORM.id == str(event_id), CalendarEventORM.user_id == user_id)
                )
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True
