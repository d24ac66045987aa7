"""Room registry API endpoints"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.models.housekeeping import HousekeepingTask, HousekeepingStatus
from app.models.room import Room, RoomType, RoomStatus
from app.models.user import User, UserRole, FRONT_DESK_ROLES
from app.schemas.room import AvailableRoomsResponse, RoomResponse, RoomStatusUpdate
from app.api.auth import require_roles
from app.services.audit import record_audit
from app.services.availability import get_available_rooms
from app.services.reservations import to_naive_utc, validate_stay_dates

router = APIRouter()
logger = structlog.get_logger()

ROOM_STAFF_ROLES = FRONT_DESK_ROLES + (UserRole.HOUSEKEEPING,)

# Housekeeping entry recorded for each manual room status change
ROOM_STATUS_TO_TASK = {
    RoomStatus.AVAILABLE: HousekeepingStatus.CLEAN,
    RoomStatus.CLEANING: HousekeepingStatus.CLEANING,
    RoomStatus.DIRTY: HousekeepingStatus.DIRTY,
    RoomStatus.MAINTENANCE: HousekeepingStatus.OUT_OF_SERVICE,
}


@router.get("/available", response_model=AvailableRoomsResponse)
async def list_available_rooms(
    room_type_id: UUID,
    check_in_date: datetime,
    check_out_date: datetime,
    db: AsyncSession = Depends(get_db),
):
    """Rooms of a type that can be held for the stay"""
    check_in = to_naive_utc(check_in_date)
    check_out = to_naive_utc(check_out_date)
    validate_stay_dates(check_in, check_out)

    room_type = await db.get(RoomType, room_type_id)
    if not room_type:
        raise HTTPException(status_code=404, detail="Room type not found")

    rooms = await get_available_rooms(db, room_type_id, check_in, check_out)
    return AvailableRoomsResponse(
        room_type_id=room_type_id,
        check_in_date=check_in,
        check_out_date=check_out,
        rooms=[RoomResponse.model_validate(room) for room in rooms],
    )


@router.patch("/{room_id}/status", response_model=RoomResponse)
async def update_room_status(
    room_id: UUID,
    status_data: RoomStatusUpdate,
    current_user: User = Depends(require_roles(*ROOM_STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """Set a room's operational status"""
    result = await db.execute(select(Room).where(Room.id == room_id))
    room = result.scalar_one_or_none()
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    before = room.status
    room.status = status_data.status

    task_status = ROOM_STATUS_TO_TASK.get(status_data.status)
    if task_status is not None:
        db.add(HousekeepingTask(
            room_id=room.id,
            staff_id=current_user.id,
            status=task_status,
            task="Status Update",
            note=status_data.note,
        ))

    record_audit(
        db,
        current_user,
        action="room.status_changed",
        resource_type="room",
        resource_id=room.id,
        before={"status": before.value},
        after={"status": room.status.value},
    )
    await db.commit()

    logger.info(
        "Room status updated",
        room_id=str(room.id),
        room_number=room.room_number,
        status=room.status.value,
    )
    return room
