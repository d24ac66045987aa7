"""
Room availability checks.

A room is free for ``[check_in, check_out)`` when no active reservation or
booking on it overlaps that window (``start < other_end and end > other_start``),
it is not under maintenance, and, for arrivals today, it is ready right now.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookedRoom, ACTIVE_BOOKING_STATUSES
from app.models.reservation import Reservation, ReservedRoom, ReservationStatus
from app.models.room import Room, RoomStatus


async def _has_overlapping_reservation(
    db: AsyncSession,
    room_id: UUID,
    check_in: datetime,
    check_out: datetime,
    exclude_reservation_id: Optional[UUID],
    now: datetime,
) -> bool:
    # Lapsed pending holds no longer block, swept or not
    query = (
        select(Reservation.id)
        .join(ReservedRoom, ReservedRoom.reservation_id == Reservation.id)
        .where(
            ReservedRoom.room_id == room_id,
            or_(
                Reservation.status == ReservationStatus.CONFIRMED,
                and_(
                    Reservation.status == ReservationStatus.PENDING,
                    or_(Reservation.expires_at.is_(None), Reservation.expires_at >= now),
                ),
            ),
            Reservation.check_in_date < check_out,
            Reservation.check_out_date > check_in,
        )
        .limit(1)
    )
    if exclude_reservation_id is not None:
        query = query.where(Reservation.id != exclude_reservation_id)

    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


async def _has_overlapping_booking(
    db: AsyncSession,
    room_id: UUID,
    check_in: datetime,
    check_out: datetime,
    exclude_booking_id: Optional[UUID],
) -> bool:
    query = (
        select(Booking.id)
        .join(BookedRoom, BookedRoom.booking_id == Booking.id)
        .where(
            BookedRoom.room_id == room_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
        .limit(1)
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


async def is_room_available(
    db: AsyncSession,
    room_id: UUID,
    check_in: datetime,
    check_out: datetime,
    exclude_reservation_id: Optional[UUID] = None,
    exclude_booking_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Check whether a room can be allocated for the given window"""
    now = now or datetime.utcnow()
    if await _has_overlapping_reservation(db, room_id, check_in, check_out, exclude_reservation_id, now):
        return False

    if await _has_overlapping_booking(db, room_id, check_in, check_out, exclude_booking_id):
        return False

    result = await db.execute(select(Room.status).where(Room.id == room_id))
    room_status = result.scalar_one_or_none()
    if room_status is None or room_status == RoomStatus.MAINTENANCE:
        return False

    # Same-day arrivals need a room that is physically ready
    today = now.date()
    if check_in.date() == today and room_status != RoomStatus.AVAILABLE:
        return False

    return True


def room_lock_query(*criteria):
    """Row locks on matching rooms, always taken in id order"""
    return select(Room.id).where(*criteria).order_by(Room.id).with_for_update()


async def lock_rooms(db: AsyncSession, *criteria) -> None:
    await db.execute(room_lock_query(*criteria))


async def get_available_rooms(
    db: AsyncSession,
    room_type_id: UUID,
    check_in: datetime,
    check_out: datetime,
    now: Optional[datetime] = None,
    lock: bool = False,
) -> List[Room]:
    """All rooms of a type that are free for the window, in room-number order"""
    query = (
        select(Room)
        .where(
            Room.room_type_id == room_type_id,
            Room.status != RoomStatus.MAINTENANCE,
        )
        .order_by(Room.room_number)
    )
    if lock:
        await lock_rooms(
            db,
            Room.room_type_id == room_type_id,
            Room.status != RoomStatus.MAINTENANCE,
        )

    result = await db.execute(query)
    rooms = result.scalars().all()

    available = []
    for room in rooms:
        if await is_room_available(db, room.id, check_in, check_out, now=now):
            available.append(room)
    return available
