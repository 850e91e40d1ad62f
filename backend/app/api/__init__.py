"""API routers."""

from app.api import events, scheduling, tasks

__all__ = [
    "events",
    "scheduling",
    "tasks",
]
