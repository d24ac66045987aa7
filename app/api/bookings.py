"""Booking API endpoints"""

import math
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import get_db, get_session_factory
from app.models.booking import BookingStatus
from app.models.notification import NotificationType
from app.models.user import User, FRONT_DESK_ROLES
from app.schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingResponse,
    BookingListResponse,
    ConfirmPaymentResponse,
    Pagination,
)
from app.api.auth import get_current_active_user, require_roles
from app.services import bookings as booking_service
from app.services.notifications import NotificationEvent, publish_notification, spawn_checkout_tasks

router = APIRouter()

BOOKINGS_LINK = "/my-reservations"


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking_data: BookingCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Convert a reservation (or walk-in request) into a booking"""
    booking = await booking_service.create_booking(db, current_user, booking_data)

    background_tasks.add_task(
        publish_notification,
        session_factory,
        NotificationEvent(
            recipient_id=current_user.id,
            message=f"Your booking {booking.booking_code} is confirmed. Thank you for choosing us!",
            link=BOOKINGS_LINK,
        ),
    )
    return BookingResponse.from_model(booking)


@router.get("/my", response_model=List[BookingResponse])
async def get_my_bookings(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's bookings"""
    bookings = await booking_service.list_guest_bookings(db, current_user.id)
    return [BookingResponse.from_model(b) for b in bookings]


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[BookingStatus] = None,
    current_user: User = Depends(require_roles(*FRONT_DESK_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """List bookings with pagination"""
    bookings, total = await booking_service.list_bookings(db, status=status, page=page, limit=limit)

    return BookingListResponse(
        bookings=[BookingResponse.from_model(b) for b in bookings],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_bookings=total,
            has_next=page * limit < total,
            has_prev=page > 1,
        ),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Booking with its payment (invoice view)"""
    booking = await booking_service.get_booking(db, booking_id)
    if booking.guest_id != current_user.id and not current_user.has_role(*FRONT_DESK_ROLES):
        raise HTTPException(status_code=404, detail="Booking not found")
    return BookingResponse.from_model(booking)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    status_data: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_roles(*FRONT_DESK_ROLES)),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Advance a booking through check-in / check-out or cancel it"""
    booking = await booking_service.update_booking_status(
        db, booking_id, status_data.status, actor=current_user
    )

    if booking.status == BookingStatus.CHECKED_OUT:
        background_tasks.add_task(
            spawn_checkout_tasks, session_factory, booking.room_ids, booking.booking_code
        )
    background_tasks.add_task(
        publish_notification,
        session_factory,
        NotificationEvent(
            recipient_id=booking.guest_id,
            message=f"Your booking {booking.booking_code} status has been updated to {booking.status.value}.",
            type=NotificationType.STATUS_UPDATE,
            link=BOOKINGS_LINK,
        ),
    )
    return BookingResponse.from_model(booking)


@router.post("/{booking_id}/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    booking_id: UUID,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_roles(*FRONT_DESK_ROLES)),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Mark a cash booking as paid"""
    booking = await booking_service.confirm_cash_payment(db, booking_id, actor=current_user)

    background_tasks.add_task(
        publish_notification,
        session_factory,
        NotificationEvent(
            recipient_id=booking.guest_id,
            message=f"Payment for booking {booking.booking_code} was successfully confirmed.",
            type=NotificationType.STATUS_UPDATE,
            link=BOOKINGS_LINK,
        ),
    )
    return ConfirmPaymentResponse(
        message="Payment confirmed successfully",
        booking=BookingResponse.from_model(booking),
    )
