"""
SQLite implementation of Task repository.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, literal_column, select
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import InfrastructureError, NotFoundError
from app.infrastructure.local.database import TaskORM, get_session_factory
from app.interfaces.task_repository import ITaskRepository
from app.models.enums import Priority
from app.models.schedule import ScheduledBlock
from app.models.task import Task, TaskCreate, TaskUpdate
from app.utils.datetime_utils import now_utc


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskORM) -> Task:
        """Convert ORM object to Pydantic model."""
        return Task(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            description=orm.description,
            priority=Priority(orm.priority),
            due_date=orm.due_date,
            start_date=orm.start_date,
            start_time=orm.start_time,
            duration_minutes=orm.duration_minutes,
            chunk_size_minutes=orm.chunk_size_minutes,
            hard_deadline=bool(orm.hard_deadline),
            completed=bool(orm.completed),
            scheduled_blocks=[
                ScheduledBlock.model_validate(entry) for entry in (orm.scheduled_blocks or [])
            ],
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _get_orm(self, session, user_id: str, task_id: UUID) -> Optional[TaskORM]:
        result = await session.execute(
            select(TaskORM).where(
                and_(TaskORM.id == str(task_id), TaskORM.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """Create a new task."""
        try:
            async with self._session_factory() as session:
                orm = TaskORM(
                    id=str(uuid4()),
                    user_id=user_id,
                    title=task.title,
                    description=task.description,
                    priority=task.priority.value,
                    due_date=task.due_date,
                    start_date=task.start_date,
                    start_time=task.start_time,
                    duration_minutes=task.duration_minutes,
                    chunk_size_minutes=task.chunk_size_minutes,
                    hard_deadline=task.hard_deadline,
                    completed=False,
                    scheduled_blocks=[],
                )
                session.add(orm)
                await session.commit()
                await session.refresh(orm)
                return self._orm_to_model(orm)
        except SQLAlchemyError as exc:
            raise InfrastructureError("Failed to create task", details=str(exc)) from exc

    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            return self._orm_to_model(orm) if orm else None

    async def list(
        self,
        user_id: str,
        include_completed: bool = True,
        limit: int = 500,
        offset: int = 0,
    ) -> list[Task]:
        """List tasks in creation order."""
        async with self._session_factory() as session:
            query = select(TaskORM).where(TaskORM.user_id == user_id)
            if not include_completed:
                query = query.where(TaskORM.completed.is_(False))
            # rowid breaks created_at ties so equal timestamps keep insertion order
            query = (
                query.order_by(TaskORM.created_at.asc(), literal_column("rowid").asc())
                .offset(offset)
                .limit(limit)
            )
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """Update an existing task."""
        try:
            async with self._session_factory() as session:
                orm = await self._get_orm(session, user_id, task_id)
                if not orm:
                    raise NotFoundError(f"Task {task_id} not found")

                update_data = update.model_dump(exclude_unset=True)
                for field, value in update_data.items():
                    if hasattr(value, "value"):  # Enum
                        value = value.value
                    setattr(orm, field, value)

                orm.updated_at = now_utc()
                await session.commit()
                await session.refresh(orm)
                return self._orm_to_model(orm)
        except SQLAlchemyError as exc:
            raise InfrastructureError(f"Failed to update task {task_id}", details=str(exc)) from exc

    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """Delete a task."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            if not orm:
                return False

            await session.delete(orm)
            await session.commit()
            return True

    async def replace_scheduled_blocks(
        self,
        user_id: str,
        task_id: UUID,
        blocks: list[ScheduledBlock],
    ) -> Task:
        """Overwrite the task's scheduled blocks."""
        try:
            async with self._session_factory() as session:
                orm = await self._get_orm(session, user_id, task_id)
                if not orm:
                    raise NotFoundError(f"Task {task_id} not found")

                orm.scheduled_blocks = [
                    block.model_dump(mode="json", by_alias=True) for block in blocks
                ]
                orm.updated_at = now_utc()
                await session.commit()
                await session.refresh(orm)
                return self._orm_to_model(orm)
        except SQLAlchemyError as exc:
            raise InfrastructureError(
                f"Failed to store blocks for task {task_id}", details=str(exc)
            ) from exc

    async def list_blocks(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ScheduledBlock]:
        """List persisted blocks within the range, sorted by date then start time."""
        tasks = await self.list(user_id, include_completed=True, limit=10_000)
        blocks = [
            block
            for task in tasks
            for block in task.scheduled_blocks
            if (start_date is None or block.date >= start_date)
            and (end_date is None or block.date <= end_date)
        ]
        return sorted(blocks, key=lambda block: (block.date, block.start_minute))
