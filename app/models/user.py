"""User model for guests and hotel staff"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base, EnumType


class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    GUEST = "guest"
    RECEPTIONIST = "receptionist"
    HOUSEKEEPING = "housekeeping"
    MANAGER = "manager"
    ADMIN = "admin"


# Roles allowed to run the front desk (bookings, reservations, payments)
FRONT_DESK_ROLES = (UserRole.ADMIN, UserRole.MANAGER, UserRole.RECEPTIONIST)


class User(Base):
    """Guests and staff accounts"""
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255))
    phone = Column(String(20))

    # Role
    role = Column(EnumType(UserRole), default=UserRole.GUEST, nullable=False)

    # Status
    is_active = Column(Boolean, default=True)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reservations = relationship("Reservation", back_populates="guest")
    bookings = relationship("Booking", back_populates="guest")

    def has_role(self, *roles: UserRole) -> bool:
        """Check if user holds one of the given roles"""
        return self.role in roles
