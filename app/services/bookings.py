"""
Booking creation and lifecycle.

``create_booking`` converts a reservation (or a walk-in request) into a firm
booking. Price and availability are re-validated before anything is written,
and the booking, its payment, the room statuses and the source reservation are
committed together or not at all.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.errors import (
    AvailabilityError,
    NotFoundError,
    PriceMismatchError,
    ReservationExpiredError,
    ValidationError,
)
from app.models.booking import Booking, BookedRoom, BookingStatus, ACTIVE_BOOKING_STATUSES
from app.models.payment import Payment, PaymentMethod, PaymentStatus
from app.models.reservation import Reservation, ReservationStatus
from app.models.room import Room, RoomStatus
from app.models.user import User
from app.schemas.booking import BookingCreate, BookedRoomLine
from app.services.audit import generate_code, record_audit
from app.services.availability import is_room_available, lock_rooms
from app.services.lifecycle import assert_booking_transition
from app.services.pricing import quote_total, sum_line_subtotals
from app.services.reservations import get_reservation, to_naive_utc, validate_stay_dates

logger = structlog.get_logger()


async def get_booking(db: AsyncSession, booking_id: UUID) -> Booking:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


async def _load_pending_reservation(
    db: AsyncSession,
    reservation_id: UUID,
    guest_id: UUID,
    now: datetime,
) -> Reservation:
    reservation = await get_reservation(db, reservation_id)
    if reservation.guest_id != guest_id:
        raise NotFoundError("Reservation not found")

    state = reservation.effective_status(now)
    if state == ReservationStatus.EXPIRED:
        raise ReservationExpiredError("Reservation has expired. Please make a new reservation.")
    if state != ReservationStatus.PENDING:
        raise AvailabilityError(f"Reservation is {state.value} and cannot be booked.")
    return reservation


def _lines_from_reservation(reservation: Reservation) -> List[BookedRoomLine]:
    return [
        BookedRoomLine(
            room_id=line.room_id,
            price_per_night=line.price_per_night,
            nights=line.nights,
            subtotal=line.subtotal,
        )
        for line in reservation.reserved_rooms
    ]


async def _room_label(db: AsyncSession, room_id: UUID) -> str:
    result = await db.execute(select(Room.room_number).where(Room.id == room_id))
    return result.scalar_one_or_none() or str(room_id)


async def create_booking(
    db: AsyncSession,
    guest: User,
    data: BookingCreate,
    now: Optional[datetime] = None,
) -> Booking:
    """Create a booking and its payment in one transaction"""
    now = now or datetime.utcnow()

    try:
        reservation = None
        if data.reservation_id is not None:
            reservation = await _load_pending_reservation(db, data.reservation_id, guest.id, now)

        check_in = data.check_in_date or (reservation.check_in_date if reservation else None)
        check_out = data.check_out_date or (reservation.check_out_date if reservation else None)
        if check_in is not None:
            check_in = to_naive_utc(check_in)
        if check_out is not None:
            check_out = to_naive_utc(check_out)
        validate_stay_dates(check_in, check_out)

        adults = data.adults_count
        children = data.children_count
        if reservation is not None:
            adults = reservation.adults_count if adults is None else adults
            children = reservation.children_count if children is None else children
        if adults is None:
            raise ValidationError("adults_count is required")

        lines = list(data.booked_rooms) or (_lines_from_reservation(reservation) if reservation else [])
        if not lines:
            raise ValidationError("booked_rooms must contain at least one room")
        room_ids = [line.room_id for line in lines]
        if len(set(room_ids)) != len(room_ids):
            raise ValidationError("booked_rooms lists the same room more than once")

        # 1. The client total must match what the server computes
        subtotal = sum_line_subtotals(lines)
        tax, expected_total = quote_total(subtotal)
        if abs(expected_total - data.total_price) > settings.price_tolerance:
            raise PriceMismatchError(
                f"Total price mismatch. Expected {expected_total:g}, got {data.total_price:g}."
            )

        # 2. Lock the rooms in a stable order, then re-check every line
        await lock_rooms(db, Room.id.in_(room_ids))
        exclude_reservation_id = reservation.id if reservation else None
        for line in lines:
            available = await is_room_available(
                db,
                line.room_id,
                check_in,
                check_out,
                exclude_reservation_id=exclude_reservation_id,
                now=now,
            )
            if not available:
                label = await _room_label(db, line.room_id)
                raise AvailabilityError(f"Room {label} is no longer available for these dates.")

        # 3. Card payments are captured immediately, cash waits for the front desk
        if data.payment_method == PaymentMethod.CASH:
            booking_status = BookingStatus.CONFIRMED_UNPAID
            payment_status = PaymentStatus.PENDING
            transaction_id = None
        else:
            booking_status = BookingStatus.CONFIRMED
            payment_status = PaymentStatus.COMPLETED
            transaction_id = generate_code("TXN", 10)

        # 4. Writes
        booking = Booking(
            booking_code=generate_code("BK"),
            reservation_id=exclude_reservation_id,
            guest_id=guest.id,
            check_in_date=check_in,
            check_out_date=check_out,
            adults_count=adults,
            children_count=children or 0,
            subtotal_amount=subtotal,
            tax_amount=tax,
            total_price=expected_total,
            status=booking_status,
            booked_rooms=[
                BookedRoom(
                    room_id=line.room_id,
                    price_per_night=line.price_per_night,
                    nights=line.nights,
                    subtotal=line.subtotal,
                )
                for line in lines
            ],
        )
        db.add(booking)
        await db.flush()

        payment = Payment(
            booking_id=booking.id,
            guest_id=guest.id,
            amount=expected_total,
            currency=settings.currency,
            payment_method=data.payment_method,
            status=payment_status,
            transaction_id=transaction_id,
        )
        db.add(payment)
        await db.flush()

        booking.payment_id = payment.id

        if reservation is not None:
            reservation.status = ReservationStatus.CONFIRMED

        room_status = RoomStatus.OCCUPIED if booking_status == BookingStatus.CHECKED_IN else RoomStatus.RESERVED
        await db.execute(
            update(Room)
            .where(Room.id.in_(room_ids))
            .values(status=room_status)
        )

        # 5. All or nothing
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Booking created",
        booking_id=str(booking.id),
        booking_code=booking.booking_code,
        reservation_id=str(exclude_reservation_id) if exclude_reservation_id else None,
        payment_method=data.payment_method.value,
        total=expected_total,
    )
    return await get_booking(db, booking.id)


async def list_bookings(
    db: AsyncSession,
    status: Optional[BookingStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[Sequence[Booking], int]:
    """Paginated bookings, newest first"""
    query = select(Booking)
    count_query = select(func.count(Booking.id))

    if status:
        query = query.where(Booking.status == status)
        count_query = count_query.where(Booking.status == status)

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    offset = (page - 1) * limit
    result = await db.execute(
        query.order_by(Booking.created_at.desc()).offset(offset).limit(limit)
    )
    return result.scalars().all(), total


async def list_guest_bookings(db: AsyncSession, guest_id: UUID) -> Sequence[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.guest_id == guest_id)
        .order_by(Booking.created_at.desc())
    )
    return result.scalars().all()


async def _release_reserved_rooms(db: AsyncSession, booking: Booking) -> None:
    """Return rooms to available unless another active booking still holds them"""
    for room_id in booking.room_ids:
        result = await db.execute(
            select(Booking.id)
            .join(BookedRoom, BookedRoom.booking_id == Booking.id)
            .where(
                BookedRoom.room_id == room_id,
                Booking.id != booking.id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .limit(1)
        )
        if result.scalar_one_or_none() is not None:
            continue
        await db.execute(
            update(Room)
            .where(Room.id == room_id, Room.status == RoomStatus.RESERVED)
            .values(status=RoomStatus.AVAILABLE)
        )


async def update_booking_status(
    db: AsyncSession,
    booking_id: UUID,
    new_status: BookingStatus,
    actor: Optional[User] = None,
) -> Booking:
    """Advance a booking and apply the matching room side effects"""
    try:
        booking = await get_booking(db, booking_id)
        old_status = booking.status
        assert_booking_transition(old_status, new_status)

        booking.status = new_status
        room_ids = booking.room_ids

        if new_status == BookingStatus.CHECKED_IN:
            await db.execute(
                update(Room).where(Room.id.in_(room_ids)).values(status=RoomStatus.OCCUPIED)
            )
        elif new_status == BookingStatus.CHECKED_OUT:
            await db.execute(
                update(Room).where(Room.id.in_(room_ids)).values(status=RoomStatus.DIRTY)
            )
        elif new_status == BookingStatus.CANCELLED:
            await _release_reserved_rooms(db, booking)
            if booking.payment is not None:
                if booking.payment.status == PaymentStatus.COMPLETED:
                    booking.payment.status = PaymentStatus.REFUNDED
                elif booking.payment.status == PaymentStatus.PENDING:
                    booking.payment.status = PaymentStatus.FAILED

        record_audit(
            db,
            actor,
            action="update_booking_status",
            resource_type="booking",
            resource_id=booking.id,
            before=old_status.value,
            after=new_status.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Booking status updated",
        booking_id=str(booking_id),
        booking_code=booking.booking_code,
        old_status=old_status.value,
        new_status=new_status.value,
    )
    return booking


async def confirm_cash_payment(
    db: AsyncSession,
    booking_id: UUID,
    actor: Optional[User] = None,
) -> Booking:
    """Record that a cash booking has been paid at the front desk"""
    try:
        booking = await get_booking(db, booking_id)
        if booking.status != BookingStatus.CONFIRMED_UNPAID:
            raise ValidationError("Booking is not in unpaid state")

        booking.status = BookingStatus.CONFIRMED
        if booking.payment is not None:
            booking.payment.status = PaymentStatus.COMPLETED
            booking.payment.transaction_id = generate_code("CASH", 10)

        record_audit(
            db,
            actor,
            action="confirm_cash_payment",
            resource_type="booking",
            resource_id=booking.id,
            before=BookingStatus.CONFIRMED_UNPAID.value,
            after=BookingStatus.CONFIRMED.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Cash payment confirmed", booking_id=str(booking_id), booking_code=booking.booking_code)
    return booking
