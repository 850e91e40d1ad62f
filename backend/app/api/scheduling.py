"""
Scheduling API endpoints.

Generate time blocks for tasks, read persisted blocks, and report
scheduling statistics.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import CurrentUser, TimeblockSvc
from app.core.exceptions import BusinessLogicError, NotFoundError, ValidationError
from app.models.enums import HorizonPreset
from app.models.schedule import (
    BlocksResponse,
    RescheduleRequest,
    ScheduleOptions,
    ScheduleRequest,
    ScheduleResult,
    SchedulingStats,
)
from app.models.task import Task

router = APIRouter()


@router.post("/schedule", response_model=ScheduleResult)
async def schedule_tasks(
    request: ScheduleRequest,
    user: CurrentUser,
    service: TimeblockSvc,
):
    """
    Schedule tasks into time blocks over [startDate, endDate].

    - Inline tasks: preview only, nothing is stored.
    - taskId: reschedule that task, other tasks' blocks are treated as busy.
    - Neither: reschedule all incomplete tasks.
    """
    try:
        return await service.schedule(user.id, request)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.post("/schedule/{preset}", response_model=ScheduleResult)
async def schedule_preset(
    preset: HorizonPreset,
    user: CurrentUser,
    service: TimeblockSvc,
    options: Optional[ScheduleOptions] = None,
):
    """Schedule over today or the current Monday-Sunday week."""
    try:
        return await service.schedule_preset(user.id, preset, options)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/blocks", response_model=BlocksResponse)
async def get_blocks(
    user: CurrentUser,
    service: TimeblockSvc,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
):
    """Get persisted blocks sorted by date then start time."""
    try:
        blocks = await service.list_blocks(user.id, start_date, end_date)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return BlocksResponse(blocks=blocks, start_date=start_date, end_date=end_date)


@router.put("/tasks/{task_id}/blocks", response_model=Task)
async def reschedule_task(
    task_id: UUID,
    request: RescheduleRequest,
    user: CurrentUser,
    service: TimeblockSvc,
):
    """Replace a task's blocks with manually chosen ones."""
    try:
        return await service.reschedule_task(user.id, task_id, request)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except BusinessLogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/stats", response_model=SchedulingStats)
async def get_stats(
    user: CurrentUser,
    service: TimeblockSvc,
):
    """Task completion and scheduling coverage for the current user."""
    return await service.get_stats(user.id)
