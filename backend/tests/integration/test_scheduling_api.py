"""
Integration tests for the scheduling, task and event APIs.

Runs the FastAPI app in-process over httpx with repositories backed by an
in-memory SQLite database.
"""

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.deps import (
    get_auth_provider,
    get_calendar_event_repository,
    get_task_repository,
)
from app.infrastructure.local.calendar_event_repository import SqliteCalendarEventRepository
from app.infrastructure.local.mock_auth import MockAuthProvider
from app.infrastructure.local.task_repository import SqliteTaskRepository
from main import app

MON = "2026-03-02"
TUE = "2026-03-03"


@pytest.fixture
async def client(session_factory):
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    event_repo = SqliteCalendarEventRepository(session_factory=session_factory)
    app.dependency_overrides[get_task_repository] = lambda: task_repo
    app.dependency_overrides[get_calendar_event_repository] = lambda: event_repo

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def create_task(client: AsyncClient, **fields) -> dict:
    payload = {"title": "Task", "due_date": MON, "duration_minutes": 60, **fields}
    response = await client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_schedule_persists_blocks_around_events(client):
    report = await create_task(client, title="Report", duration_minutes=90, chunk_size_minutes=30)
    response = await client.post(
        "/api/events",
        json={"title": "Standup", "date": MON, "start_time": "09:00", "end_time": "09:30"},
    )
    assert response.status_code == 201, response.text

    response = await client.post(
        "/api/scheduling/schedule",
        json={"startDate": MON, "endDate": TUE},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    blocks = data["byTask"][report["id"]]
    assert [(b["startTime"], b["endTime"]) for b in blocks] == [
        ("09:30", "10:00"),
        ("10:00", "10:30"),
        ("10:30", "11:00"),
    ]
    assert list(data["byDate"]) == [MON]
    assert data["partial"] == []

    stored = (await client.get(f"/api/tasks/{report['id']}")).json()
    assert len(stored["scheduled_blocks"]) == 3
    assert stored["scheduled_blocks"][0]["taskId"] == report["id"]


@pytest.mark.asyncio
async def test_schedule_single_task_around_others(client):
    first = await create_task(client, title="First")
    second = await create_task(client, title="Second")
    await client.post("/api/scheduling/schedule", json={"startDate": MON, "endDate": MON})

    response = await client.post(
        "/api/scheduling/schedule",
        json={"startDate": MON, "endDate": MON, "taskId": first["id"]},
    )

    assert response.status_code == 200, response.text
    assert list(response.json()["byTask"]) == [first["id"]]
    blocks = (
        await client.get("/api/scheduling/blocks", params={"startDate": MON, "endDate": MON})
    ).json()["blocks"]
    assert sorted(b["taskId"] for b in blocks) == sorted([first["id"], second["id"]])
    assert len({b["startTime"] for b in blocks}) == 2


@pytest.mark.asyncio
async def test_inline_preview_is_not_stored(client):
    response = await client.post(
        "/api/scheduling/schedule",
        json={
            "startDate": MON,
            "endDate": MON,
            "tasks": [{"id": "draft", "dueDate": MON, "durationMinutes": 30, "priority": "high"}],
            "existingEvents": [{"date": MON, "startTime": "09:00", "endTime": "12:00"}],
        },
    )

    assert response.status_code == 200, response.text
    assert response.json()["byTask"]["draft"][0]["startTime"] == "12:00"
    blocks = (await client.get("/api/scheduling/blocks")).json()["blocks"]
    assert blocks == []


@pytest.mark.asyncio
async def test_schedule_reversed_range_is_422(client):
    response = await client.post(
        "/api/scheduling/schedule",
        json={"startDate": TUE, "endDate": MON},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_schedule_task_id_with_tasks_is_422(client):
    task = await create_task(client)

    response = await client.post(
        "/api/scheduling/schedule",
        json={
            "startDate": MON,
            "endDate": MON,
            "taskId": task["id"],
            "tasks": [],
        },
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_schedule_unknown_task_is_404(client):
    response = await client.post(
        "/api/scheduling/schedule",
        json={"startDate": MON, "endDate": MON, "taskId": "00000000-0000-0000-0000-000000000000"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_schedule_today_preset(client):
    today = date.today().isoformat()
    task = await create_task(client, due_date=today)

    response = await client.post("/api/scheduling/schedule/today")

    assert response.status_code == 200, response.text
    data = response.json()
    assert list(data["byDate"]) == [today]
    assert data["byTask"][task["id"]][0]["startTime"] == "09:00"


@pytest.mark.asyncio
async def test_unknown_preset_is_422(client):
    response = await client.post("/api/scheduling/schedule/month")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_manual_reschedule(client):
    task = await create_task(client)
    await client.post(
        "/api/events",
        json={"title": "Lunch", "date": TUE, "start_time": "12:00", "end_time": "13:00"},
    )

    response = await client.put(
        f"/api/scheduling/tasks/{task['id']}/blocks",
        json={"blocks": [{"date": TUE, "startTime": "14:00", "endTime": "15:00"}]},
    )
    assert response.status_code == 200, response.text
    assert response.json()["scheduled_blocks"][0]["startTime"] == "14:00"

    response = await client.put(
        f"/api/scheduling/tasks/{task['id']}/blocks",
        json={"blocks": [{"date": TUE, "startTime": "12:30", "endTime": "13:30"}]},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stats(client):
    task = await create_task(client, duration_minutes=120)
    await create_task(client, duration_minutes=60)
    await client.patch(f"/api/tasks/{task['id']}", json={"completed": True})
    await client.post("/api/scheduling/schedule", json={"startDate": MON, "endDate": MON})

    response = await client.get("/api/scheduling/stats")

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["taskStats"] == {"total": 2, "completed": 1, "completionRate": 50.0}
    assert data["schedulingStats"]["totalMinutesScheduled"] == 60
    assert data["schedulingStats"]["scheduledPercentage"] == 33.33
    assert data["schedulingStats"]["dailyDistribution"] == {MON: 60}


@pytest.mark.asyncio
async def test_task_crud(client):
    task = await create_task(client, title="Draft")

    response = await client.patch(f"/api/tasks/{task['id']}", json={"chunk_size_minutes": 90})
    assert response.status_code == 422

    response = await client.patch(f"/api/tasks/{task['id']}", json={"title": "Final"})
    assert response.status_code == 200
    assert response.json()["title"] == "Final"

    listing = (await client.get("/api/tasks")).json()
    assert [item["id"] for item in listing] == [task["id"]]

    assert (await client.delete(f"/api/tasks/{task['id']}")).status_code == 204
    assert (await client.get(f"/api/tasks/{task['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_create_task_rejects_bad_start_time(client):
    response = await client.post(
        "/api/tasks",
        json={"title": "Bad", "due_date": MON, "start_time": "25:00"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_events_range_and_delete(client):
    created = (
        await client.post(
            "/api/events",
            json={"title": "Review", "date": MON, "start_time": "15:00", "end_time": "16:00"},
        )
    ).json()

    listing = await client.get("/api/events", params={"startDate": MON, "endDate": TUE})
    assert [event["id"] for event in listing.json()] == [created["id"]]

    assert (await client.delete(f"/api/events/{created['id']}")).status_code == 204
    assert (await client.delete(f"/api/events/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_event_end_before_start_is_422(client):
    response = await client.post(
        "/api/events",
        json={"title": "Bad", "date": MON, "start_time": "11:00", "end_time": "10:00"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_auth_scopes_data_per_user(client):
    app.dependency_overrides[get_auth_provider] = lambda: MockAuthProvider(enabled=True)

    assert (await client.get("/api/tasks")).status_code == 401
    bad = await client.get("/api/tasks", headers={"Authorization": "Bearer a b"})
    assert bad.status_code == 401
    assert (await client.get("/api/tasks", headers={"Authorization": "Token alice"})).status_code == 401

    alice = {"Authorization": "Bearer alice"}
    response = await client.post(
        "/api/tasks", json={"title": "Hers", "due_date": MON}, headers=alice
    )
    assert response.status_code == 201
    assert response.json()["user_id"] == "alice"

    theirs = await client.get("/api/tasks", headers={"Authorization": "Bearer bob"})
    assert theirs.json() == []
    mine = await client.get("/api/tasks", headers=alice)
    assert [task["title"] for task in mine.json()] == ["Hers"]


@pytest.mark.asyncio
async def test_non_canonical_clock_times_are_422(client):
    event = await client.post(
        "/api/events",
        json={"title": "Early", "date": MON, "start_time": "9:00", "end_time": "10:00"},
    )
    task = await client.post(
        "/api/tasks",
        json={"title": "Pinned", "due_date": MON, "start_time": "+9:30"},
    )
    schedule = await client.post(
        "/api/scheduling/schedule",
        json={"startDate": MON, "endDate": MON, "workingHoursStart": "9:0"},
    )

    assert event.status_code == 422
    assert task.status_code == 422
    assert schedule.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["priority", "title", "due_date", "completed", "hard_deadline"])
async def test_patch_null_required_field_is_422_and_task_stays_readable(client, field):
    task = await create_task(client)

    response = await client.patch(f"/api/tasks/{task['id']}", json={field: None})
    assert response.status_code == 422

    listing = await client.get("/api/tasks")
    assert listing.status_code == 200
    assert listing.json()[0]["priority"] == "medium"
    schedule = await client.post(
        "/api/scheduling/schedule", json={"startDate": MON, "endDate": MON}
    )
    assert schedule.status_code == 200, schedule.text
    assert (await client.get("/api/scheduling/stats")).status_code == 200


@pytest.mark.asyncio
async def test_patch_can_clear_nullable_field(client):
    task = await create_task(client, start_time="10:00")

    response = await client.patch(
        f"/api/tasks/{task['id']}", json={"start_time": None, "duration_minutes": None}
    )

    assert response.status_code == 200, response.text
    assert response.json()["start_time"] is None
    assert response.json()["duration_minutes"] is None
