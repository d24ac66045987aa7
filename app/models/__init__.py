"""Database models"""

from app.models.user import User, UserRole
from app.models.room import Room, RoomType, RoomStatus
from app.models.reservation import Reservation, ReservedRoom, ReservationStatus
from app.models.booking import Booking, BookedRoom, BookingStatus
from app.models.payment import Payment, PaymentMethod, PaymentStatus
from app.models.notification import Notification, NotificationType
from app.models.housekeeping import HousekeepingTask, HousekeepingStatus
from app.models.audit import AuditLog

__all__ = [
    "User",
    "UserRole",
    "Room",
    "RoomType",
    "RoomStatus",
    "Reservation",
    "ReservedRoom",
    "ReservationStatus",
    "Booking",
    "BookedRoom",
    "BookingStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Notification",
    "NotificationType",
    "HousekeepingTask",
    "HousekeepingStatus",
    "AuditLog",
]
