"""
Task repository interface.

Defines the contract for task persistence operations.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from app.models.schedule import ScheduledBlock
from app.models.task import Task, TaskCreate, TaskUpdate


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """
        Create a new task.

        Args:
            user_id: Owner user ID
            task: Task creation data

        Returns:
            Created task with generated ID and timestamps
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """
        Get a task by ID.

        Args:
            user_id: Owner user ID
            task_id: Task ID

        Returns:
            Task if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        user_id: str,
        include_completed: bool = True,
        limit: int = 500,
        offset: int = 0,
    ) -> list[Task]:
        """
        List tasks in insertion (creation) order.

        Args:
            user_id: Owner user ID
            include_completed: Include completed tasks
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            List of tasks
        """
        pass

    @abstractmethod
    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """
        Update a task.

        Raises:
            NotFoundError: If task not found
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """
        Delete a task.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def replace_scheduled_blocks(
        self,
        user_id: str,
        task_id: UUID,
        blocks: list[ScheduledBlock],
    ) -> Task:
        """
        Overwrite a task's scheduled_blocks.

        Raises:
            NotFoundError: If task not found
        """
        pass

    @abstractmethod
    async def list_blocks(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ScheduledBlock]:
        """
        List persisted blocks of all the user's tasks within a date range.

        Returns:
            Blocks sorted by date, then start time
        """
        pass
