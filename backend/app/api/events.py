"""
Calendar event API endpoints.

Fixed commitments that occupy capacity during scheduling.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import CalendarEventRepo, CurrentUser
from app.models.event import CalendarEvent, CalendarEventCreate

router = APIRouter()


@router.post("", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: CalendarEventCreate,
    user: CurrentUser,
    repo: CalendarEventRepo,
):
    """Create a calendar event."""
    return await repo.create(user.id, event)


@router.get("", response_model=list[CalendarEvent])
async def list_events(
    user: CurrentUser,
    repo: CalendarEventRepo,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
):
    """List events within [startDate, endDate]."""
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="startDate must not be after endDate",
        )
    return await repo.list_by_range(user.id, start_date, end_date)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    user: CurrentUser,
    repo: CalendarEventRepo,
):
    """Delete a calendar event."""
    deleted = await repo.delete(user.id, event_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
