"""
Reservation (soft hold) lifecycle.

A reservation pins one room of the requested type for ``reservation_hold_minutes``
while the guest completes payment. Holds are never deleted; they move from
``pending`` to ``confirmed``, ``expired`` or ``cancelled``.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.errors import AvailabilityError, NotFoundError, ValidationError
from app.models.reservation import Reservation, ReservedRoom, ReservationStatus
from app.models.room import RoomType
from app.models.user import User
from app.services.audit import generate_code, record_audit
from app.services.availability import get_available_rooms
from app.services.lifecycle import assert_reservation_transition
from app.services.pricing import quote_stay

logger = structlog.get_logger()


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def validate_stay_dates(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    if check_in is None or check_out is None:
        raise ValidationError("check_in_date and check_out_date are required")
    if check_in >= check_out:
        raise ValidationError("Check-out date must be after check-in date")


async def get_reservation(db: AsyncSession, reservation_id: UUID) -> Reservation:
    result = await db.execute(
        select(Reservation)
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    reservation = result.scalar_one_or_none()
    if not reservation:
        raise NotFoundError("Reservation not found")
    return reservation


async def create_reservation(
    db: AsyncSession,
    guest_id: UUID,
    room_type_id: UUID,
    check_in: datetime,
    check_out: datetime,
    adults: int,
    children: int = 0,
    now: Optional[datetime] = None,
) -> Reservation:
    """Hold the first free room of a type for the requested stay"""
    if check_in is not None:
        check_in = to_naive_utc(check_in)
    if check_out is not None:
        check_out = to_naive_utc(check_out)
    validate_stay_dates(check_in, check_out)
    if adults is None or adults < 1:
        raise ValidationError("adults_count must be at least 1")
    if children is not None and children < 0:
        raise ValidationError("children_count cannot be negative")

    now = now or datetime.utcnow()

    try:
        room_type = await db.get(RoomType, room_type_id)
        if not room_type:
            raise NotFoundError("Room type not found")

        # Candidate rooms stay locked until the hold is written
        rooms = await get_available_rooms(db, room_type_id, check_in, check_out, now=now, lock=True)
        if not rooms:
            raise AvailabilityError(f"No {room_type.name} rooms are available for these dates.")

        room = rooms[0]
        quote = quote_stay(room_type.base_price, room_type.discount, check_in, check_out)

        reservation = Reservation(
            reservation_code=generate_code("RES"),
            guest_id=guest_id,
            check_in_date=check_in,
            check_out_date=check_out,
            adults_count=adults,
            children_count=children or 0,
            rooms_count=1,
            subtotal_amount=quote.subtotal,
            tax_amount=quote.tax,
            total_amount=quote.total,
            status=ReservationStatus.PENDING,
            expires_at=now + timedelta(minutes=settings.reservation_hold_minutes),
            reserved_rooms=[
                ReservedRoom(
                    room_id=room.id,
                    price_per_night=quote.price_per_night,
                    nights=quote.nights,
                    subtotal=quote.subtotal,
                ),
            ],
        )
        db.add(reservation)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Reservation created",
        reservation_id=str(reservation.id),
        reservation_code=reservation.reservation_code,
        room_id=str(room.id),
        total=quote.total,
    )
    return await get_reservation(db, reservation.id)


async def list_reservations(
    db: AsyncSession,
    guest_id: Optional[UUID] = None,
    status: Optional[ReservationStatus] = None,
    now: Optional[datetime] = None,
) -> List[Reservation]:
    """List reservations, newest first; status filters see lazy expiry"""
    now = now or datetime.utcnow()
    query = select(Reservation)

    if guest_id is not None:
        query = query.where(Reservation.guest_id == guest_id)

    if status == ReservationStatus.EXPIRED:
        query = query.where(or_(
            Reservation.status == ReservationStatus.EXPIRED,
            and_(Reservation.status == ReservationStatus.PENDING, Reservation.expires_at < now),
        ))
    elif status == ReservationStatus.PENDING:
        query = query.where(
            Reservation.status == ReservationStatus.PENDING,
            Reservation.expires_at >= now,
        )
    elif status is not None:
        query = query.where(Reservation.status == status)

    result = await db.execute(query.order_by(Reservation.created_at.desc()))
    return list(result.scalars().all())


async def update_reservation_status(
    db: AsyncSession,
    reservation_id: UUID,
    new_status: ReservationStatus,
    actor: Optional[User] = None,
    now: Optional[datetime] = None,
) -> Reservation:
    """Move a reservation along its lifecycle"""
    now = now or datetime.utcnow()
    try:
        reservation = await get_reservation(db, reservation_id)
        current = reservation.effective_status(now)

        # Writing the expiry a reader already sees is the sweep's job done early
        if not (current == new_status == ReservationStatus.EXPIRED):
            assert_reservation_transition(current, new_status)

        reservation.status = new_status
        record_audit(
            db,
            actor,
            action="update_reservation_status",
            resource_type="reservation",
            resource_id=reservation.id,
            before=current.value,
            after=new_status.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Reservation status updated",
        reservation_id=str(reservation_id),
        old_status=current.value,
        new_status=new_status.value,
    )
    return reservation


async def cancel_reservation(
    db: AsyncSession,
    reservation_id: UUID,
    guest: User,
    now: Optional[datetime] = None,
) -> Reservation:
    """Guest releases their own pending hold"""
    result = await db.execute(
        select(Reservation.guest_id).where(Reservation.id == reservation_id)
    )
    owner_id = result.scalar_one_or_none()
    if owner_id is None or owner_id != guest.id:
        raise NotFoundError("Reservation not found")
    return await update_reservation_status(db, reservation_id, ReservationStatus.CANCELLED, actor=guest, now=now)


async def expire_stale_reservations(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Persist expiry for every lapsed pending hold; safe to run repeatedly"""
    now = now or datetime.utcnow()
    result = await db.execute(
        update(Reservation)
        .where(
            Reservation.status == ReservationStatus.PENDING,
            Reservation.expires_at < now,
        )
        .values(status=ReservationStatus.EXPIRED, updated_at=now)
    )
    await db.commit()

    expired = result.rowcount or 0
    if expired:
        logger.info("Expired stale reservations", count=expired)
    return expired
