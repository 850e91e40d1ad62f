"""
Unit tests for scheduling statistics.
"""

from datetime import date, datetime
from uuid import uuid4

from app.models.schedule import ScheduledBlock
from app.models.task import Task
from app.services.schedule_stats_service import compute_scheduling_stats

MON = date(2026, 3, 2)
TUE = date(2026, 3, 3)


def make_task(
    duration_minutes: int | None = 60,
    completed: bool = False,
    blocks: list[tuple[date, int, int]] | None = None,
) -> Task:
    now = datetime.now()
    task_id = uuid4()
    return Task(
        id=task_id,
        user_id="test_user",
        title="Task",
        due_date=TUE,
        duration_minutes=duration_minutes,
        completed=completed,
        scheduled_blocks=[
            ScheduledBlock.create(str(task_id), day, start, length)
            for day, start, length in (blocks or [])
        ],
        created_at=now,
        updated_at=now,
    )


def test_empty_task_list_has_zero_rates():
    stats = compute_scheduling_stats([])

    assert stats.task_stats.total == 0
    assert stats.task_stats.completion_rate == 0.0
    assert stats.scheduling_stats.scheduled_percentage == 0.0
    assert stats.scheduling_stats.daily_distribution == {}


def test_completion_and_coverage():
    tasks = [
        make_task(120, blocks=[(TUE, 540, 60), (MON, 600, 30)]),
        make_task(60, completed=True, blocks=[(MON, 540, 60)]),
        make_task(None),
    ]

    stats = compute_scheduling_stats(tasks)

    assert stats.task_stats.total == 3
    assert stats.task_stats.completed == 1
    assert stats.task_stats.completion_rate == 33.33
    assert stats.scheduling_stats.total_minutes_scheduled == 150
    assert stats.scheduling_stats.total_task_minutes == 180
    assert stats.scheduling_stats.scheduled_percentage == 83.33
    assert list(stats.scheduling_stats.daily_distribution.items()) == [(MON, 90), (TUE, 60)]


def test_stats_serialize_with_camel_case():
    payload = compute_scheduling_stats([make_task(60)]).model_dump(mode="json", by_alias=True)

    assert payload["taskStats"]["completionRate"] == 0.0
    assert payload["schedulingStats"]["totalTaskMinutes"] == 60
