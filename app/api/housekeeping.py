"""Housekeeping task API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.models.housekeeping import HousekeepingTask, HousekeepingStatus
from app.models.room import Room, RoomStatus
from app.models.user import User
from app.schemas.room import HousekeepingTaskResponse, HousekeepingTaskUpdate
from app.api.auth import require_roles
from app.api.rooms import ROOM_STAFF_ROLES

router = APIRouter()
logger = structlog.get_logger()


@router.get("/tasks", response_model=List[HousekeepingTaskResponse])
async def list_tasks(
    status: Optional[HousekeepingStatus] = None,
    current_user: User = Depends(require_roles(*ROOM_STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """List housekeeping tasks, newest first"""
    query = select(HousekeepingTask)
    if status:
        query = query.where(HousekeepingTask.status == status)
    query = query.order_by(HousekeepingTask.created_at.desc())

    result = await db.execute(query)
    return result.scalars().all()


@router.patch("/tasks/{task_id}", response_model=HousekeepingTaskResponse)
async def update_task(
    task_id: UUID,
    update_data: HousekeepingTaskUpdate,
    current_user: User = Depends(require_roles(*ROOM_STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Update a task and move its room along"""
    result = await db.execute(select(HousekeepingTask).where(HousekeepingTask.id == task_id))
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(status_code=404, detail="Housekeeping task not found")

    task.status = update_data.status
    task.staff_id = current_user.id
    if update_data.note is not None:
        task.note = update_data.note

    room = await db.get(Room, task.room_id)
    if room:
        default_status = (
            RoomStatus.AVAILABLE if update_data.status == HousekeepingStatus.CLEAN else RoomStatus.CLEANING
        )
        room.status = update_data.room_status or default_status

    await db.commit()
    await db.refresh(task)

    logger.info(
        "Housekeeping task updated",
        task_id=str(task.id),
        room_id=str(task.room_id),
        status=task.status.value,
    )
    return task
