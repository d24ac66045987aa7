"""Reservation schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field
from sqlalchemy import inspect

from app.models.reservation import Reservation, ReservationStatus


def loaded(obj, attr: str):
    """Relationship value if already loaded, else None"""
    if obj is None or attr in inspect(obj).unloaded:
        return None
    return getattr(obj, attr)


class ReservationCreate(BaseModel):
    """Create reservation request"""
    room_type_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    adults_count: int = Field(ge=1)
    children_count: int = Field(0, ge=0)


class ReservationStatusUpdate(BaseModel):
    """Staff status override"""
    status: ReservationStatus


class ReservedRoomResponse(BaseModel):
    room_id: UUID
    room_number: Optional[str] = None
    price_per_night: float
    nights: int
    subtotal: float


class ReservationResponse(BaseModel):
    """Reservation view; pending holds past their deadline read as expired"""
    id: UUID
    reservation_code: str
    guest_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    adults_count: int
    children_count: int
    guests: int
    rooms_count: int
    room_type_id: Optional[UUID] = None
    room_type_name: Optional[str] = None
    reserved_rooms: List[ReservedRoomResponse]
    subtotal_amount: float
    tax_amount: float
    total_amount: float
    status: ReservationStatus
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, reservation: Reservation, now: Optional[datetime] = None) -> "ReservationResponse":
        lines = []
        room_type = None
        for line in reservation.reserved_rooms:
            room = loaded(line, "room")
            if room_type is None:
                room_type = loaded(room, "room_type")
            lines.append(ReservedRoomResponse(
                room_id=line.room_id,
                room_number=room.room_number if room else None,
                price_per_night=line.price_per_night,
                nights=line.nights,
                subtotal=line.subtotal,
            ))

        return cls(
            id=reservation.id,
            reservation_code=reservation.reservation_code,
            guest_id=reservation.guest_id,
            check_in_date=reservation.check_in_date,
            check_out_date=reservation.check_out_date,
            adults_count=reservation.adults_count,
            children_count=reservation.children_count,
            guests=reservation.adults_count + reservation.children_count,
            rooms_count=reservation.rooms_count,
            room_type_id=room_type.id if room_type else None,
            room_type_name=room_type.name if room_type else None,
            reserved_rooms=lines,
            subtotal_amount=reservation.subtotal_amount,
            tax_amount=reservation.tax_amount,
            total_amount=reservation.total_amount,
            status=reservation.effective_status(now),
            expires_at=reservation.expires_at,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
