"""Reservation (soft hold) API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import get_db, get_session_factory
from app.models.notification import NotificationType
from app.models.reservation import ReservationStatus
from app.models.user import User, FRONT_DESK_ROLES
from app.schemas.reservation import ReservationCreate, ReservationStatusUpdate, ReservationResponse
from app.api.auth import get_current_active_user, require_roles
from app.services import reservations as reservation_service
from app.services.notifications import NotificationEvent, publish_notification

router = APIRouter()

RESERVATIONS_LINK = "/my-reservations"


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Hold one room of the requested type for the stay"""
    reservation = await reservation_service.create_reservation(
        db,
        guest_id=current_user.id,
        room_type_id=reservation_data.room_type_id,
        check_in=reservation_data.check_in_date,
        check_out=reservation_data.check_out_date,
        adults=reservation_data.adults_count,
        children=reservation_data.children_count,
    )

    background_tasks.add_task(
        publish_notification,
        session_factory,
        NotificationEvent(
            recipient_id=current_user.id,
            message=f"Your reservation {reservation.reservation_code} has been created and is pending confirmation.",
            link=RESERVATIONS_LINK,
        ),
    )
    return ReservationResponse.from_model(reservation)


@router.get("/my", response_model=List[ReservationResponse])
async def get_my_reservations(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's reservations"""
    reservations = await reservation_service.list_reservations(db, guest_id=current_user.id)
    return [ReservationResponse.from_model(r) for r in reservations]


@router.get("", response_model=List[ReservationResponse])
async def list_reservations(
    status: Optional[ReservationStatus] = None,
    current_user: User = Depends(require_roles(*FRONT_DESK_ROLES)),
    db: AsyncSession = Depends(get_db),
):
    """List all reservations, optionally by status"""
    reservations = await reservation_service.list_reservations(db, status=status)
    return [ReservationResponse.from_model(r) for r in reservations]


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: UUID,
    status_data: ReservationStatusUpdate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_roles(*FRONT_DESK_ROLES)),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """Staff status override"""
    reservation = await reservation_service.update_reservation_status(
        db, reservation_id, status_data.status, actor=current_user
    )

    background_tasks.add_task(
        publish_notification,
        session_factory,
        NotificationEvent(
            recipient_id=reservation.guest_id,
            message=f"Your reservation {reservation.reservation_code} status has been updated to {reservation.status.value}.",
            type=NotificationType.STATUS_UPDATE,
            link=RESERVATIONS_LINK,
        ),
    )
    return ReservationResponse.from_model(reservation)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Guest releases their own pending hold"""
    reservation = await reservation_service.cancel_reservation(db, reservation_id, current_user)
    return ReservationResponse.from_model(reservation)
