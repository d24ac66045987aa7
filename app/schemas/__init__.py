"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from app.schemas.reservation import (
    ReservationCreate,
    ReservationStatusUpdate,
    ReservationResponse,
    ReservedRoomResponse,
)
from app.schemas.booking import (
    BookedRoomLine,
    BookingCreate,
    BookingStatusUpdate,
    BookingResponse,
    BookingListResponse,
    ConfirmPaymentResponse,
    PaymentResponse,
)
from app.schemas.room import (
    RoomResponse,
    AvailableRoomsResponse,
    RoomStatusUpdate,
    HousekeepingTaskResponse,
    HousekeepingTaskUpdate,
)
from app.schemas.notification import NotificationResponse

__all__ = [
    "Token",
    "RefreshRequest",
    "RegisterRequest",
    "UserResponse",
    "ReservationCreate",
    "ReservationStatusUpdate",
    "ReservationResponse",
    "ReservedRoomResponse",
    "BookedRoomLine",
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingResponse",
    "BookingListResponse",
    "ConfirmPaymentResponse",
    "PaymentResponse",
    "RoomResponse",
    "AvailableRoomsResponse",
    "RoomStatusUpdate",
    "HousekeepingTaskResponse",
    "HousekeepingTaskUpdate",
    "NotificationResponse",
]
