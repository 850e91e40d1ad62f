"""
Task completion and scheduling coverage statistics.
"""

from collections import defaultdict
from datetime import date

from app.models.schedule import SchedulingStats, SchedulingTotals, TaskStats
from app.models.task import Task


def _percentage(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


def compute_scheduling_stats(tasks: list[Task]) -> SchedulingStats:
    """Summarize completion rate and how much estimated work has blocks."""
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)

    daily: dict[date, int] = defaultdict(int)
    scheduled_minutes = 0
    for task in tasks:
        for block in task.scheduled_blocks:
            daily[block.date] += block.duration_minutes
            scheduled_minutes += block.duration_minutes
    task_minutes = sum(task.duration_minutes or 0 for task in tasks)

    return SchedulingStats(
        task_stats=TaskStats(
            total=total,
            completed=completed,
            completion_rate=_percentage(completed, total),
        ),
        scheduling_stats=SchedulingTotals(
            total_minutes_scheduled=scheduled_minutes,
            total_task_minutes=task_minutes,
            scheduled_percentage=_percentage(scheduled_minutes, task_minutes),
            daily_distribution={day: daily[day] for day in sorted(daily)},
        ),
    )
