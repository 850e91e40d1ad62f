"""
Enum definitions for the application.

These enums are used across models and provide type-safe priority/strategy values.
Values match the wire format used by the task store and the calendar UI.
"""

from enum import Enum


class Priority(str, Enum):
    """Task priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


class SchedulingStrategy(str, Enum):
    """Ordering strategy for flexible (unpinned) tasks."""

    BALANCED = "balanced"
    DEADLINE_FIRST = "deadline-first"
    PRIORITY_FIRST = "priority-first"


class BalancedOrdering(str, Enum):
    """
    Key order used by the BALANCED strategy.

    DEADLINE_THEN_PRIORITY = due date dominates, priority breaks ties
    PRIORITY_THEN_DEADLINE = priority dominates, due date breaks ties
    """

    DEADLINE_THEN_PRIORITY = "deadline-then-priority"
    PRIORITY_THEN_DEADLINE = "priority-then-deadline"


class HorizonPreset(str, Enum):
    """Named scheduling horizons."""

    TODAY = "today"
    WEEK = "week"
