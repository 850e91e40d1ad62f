"""
Unit tests for task queue ordering.
"""

from datetime import date

from app.models.enums import BalancedOrdering, Priority, SchedulingStrategy
from app.models.schedule import SchedulableTask
from app.services.task_queue_builder import build_task_queue, is_schedulable


def make_task(
    task_id: str,
    priority: Priority = Priority.MEDIUM,
    due_date: date = date(2026, 3, 10),
    duration_minutes: int | None = 60,
    **kwargs,
) -> SchedulableTask:
    return SchedulableTask(
        id=task_id,
        priority=priority,
        due_date=due_date,
        duration_minutes=duration_minutes,
        **kwargs,
    )


def ids(tasks) -> list[str]:
    return [task.id for task in tasks]


def test_completed_and_unestimated_tasks_are_dropped():
    tasks = [
        make_task("done", completed=True),
        make_task("none", duration_minutes=None),
        make_task("zero", duration_minutes=0),
        make_task("ok"),
    ]

    queue = build_task_queue(tasks)

    assert ids(queue) == ["ok"]
    assert not is_schedulable(tasks[0])
    assert not is_schedulable(tasks[2])


def test_priority_first_orders_by_priority_then_due():
    tasks = [
        make_task("low-early", Priority.LOW, date(2026, 3, 5)),
        make_task("high-late", Priority.HIGH, date(2026, 3, 9)),
        make_task("high-early", Priority.HIGH, date(2026, 3, 8)),
    ]

    queue = build_task_queue(tasks, SchedulingStrategy.PRIORITY_FIRST)

    assert ids(queue) == ["high-early", "high-late", "low-early"]


def test_deadline_first_orders_by_due_then_priority():
    tasks = [
        make_task("a", Priority.HIGH, date(2026, 3, 9)),
        make_task("b", Priority.LOW, date(2026, 3, 5)),
        make_task("c", Priority.MEDIUM, date(2026, 3, 5)),
    ]

    queue = build_task_queue(tasks, SchedulingStrategy.DEADLINE_FIRST)

    assert ids(queue) == ["c", "b", "a"]


def test_balanced_defaults_to_deadline_then_priority():
    tasks = [
        make_task("a", Priority.HIGH, date(2026, 3, 9)),
        make_task("b", Priority.LOW, date(2026, 3, 5)),
    ]

    assert ids(build_task_queue(tasks, SchedulingStrategy.BALANCED)) == ["b", "a"]
    assert ids(
        build_task_queue(
            tasks,
            SchedulingStrategy.BALANCED,
            BalancedOrdering.PRIORITY_THEN_DEADLINE,
        )
    ) == ["a", "b"]


def test_ties_keep_insertion_order():
    tasks = [make_task(f"t{i}") for i in range(5)]

    for strategy in SchedulingStrategy:
        assert ids(build_task_queue(tasks, strategy)) == ["t0", "t1", "t2", "t3", "t4"]


def test_pinned_tasks_come_first_ordered_by_pin():
    tasks = [
        make_task("flex-high", Priority.HIGH, date(2026, 3, 2)),
        make_task("pin-later", start_date=date(2026, 3, 4)),
        make_task("pin-timed", start_date=date(2026, 3, 3), start_time="14:00"),
        make_task("pin-early-time", start_date=date(2026, 3, 3), start_time="10:30"),
        make_task("pin-date-only", start_date=date(2026, 3, 3)),
    ]

    queue = build_task_queue(tasks)

    assert ids(queue.pinned) == ["pin-date-only", "pin-early-time", "pin-timed", "pin-later"]
    assert ids(queue.unpinned) == ["flex-high"]
    assert ids(queue)[-1] == "flex-high"
    assert len(queue) == 5
