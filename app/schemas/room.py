"""Room and housekeeping schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel

from app.models.housekeeping import HousekeepingStatus
from app.models.room import RoomStatus


class RoomTypeSummary(BaseModel):
    id: UUID
    name: str
    base_price: float
    discount: float
    max_adults: int
    max_children: int

    class Config:
        from_attributes = True


class RoomResponse(BaseModel):
    id: UUID
    room_number: str
    room_type_id: UUID
    floor: int
    status: RoomStatus
    notes: Optional[str]
    room_type: Optional[RoomTypeSummary] = None

    class Config:
        from_attributes = True


class AvailableRoomsResponse(BaseModel):
    room_type_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    rooms: List[RoomResponse]


class RoomStatusUpdate(BaseModel):
    status: RoomStatus
    note: Optional[str] = None


class HousekeepingTaskResponse(BaseModel):
    id: UUID
    room_id: UUID
    staff_id: Optional[UUID]
    status: HousekeepingStatus
    task: str
    note: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class HousekeepingTaskUpdate(BaseModel):
    status: HousekeepingStatus
    note: Optional[str] = None
    room_status: Optional[RoomStatus] = None
