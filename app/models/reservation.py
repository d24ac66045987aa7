"""Reservation (soft hold) model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base, EnumType


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Reservation(Base):
    """Time-boxed hold on one room"""
    __tablename__ = "reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reservation_code = Column(String(20), unique=True, nullable=False)
    guest_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Stay
    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    adults_count = Column(Integer, nullable=False)
    children_count = Column(Integer, nullable=False, default=0)
    rooms_count = Column(Integer, nullable=False, default=1)

    # Pricing
    subtotal_amount = Column(Float, nullable=False)
    tax_amount = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)

    # Status
    status = Column(EnumType(ReservationStatus), default=ReservationStatus.PENDING, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guest = relationship("User", back_populates="reservations")
    reserved_rooms = relationship(
        "ReservedRoom",
        back_populates="reservation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def effective_status(self, now: datetime = None) -> ReservationStatus:
        """Status as seen by readers: a lapsed pending hold counts as expired"""
        now = now or datetime.utcnow()
        if self.status == ReservationStatus.PENDING and self.expires_at < now:
            return ReservationStatus.EXPIRED
        return self.status


class ReservedRoom(Base):
    """Room line owned by a reservation"""
    __tablename__ = "reservation_rooms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True)
    price_per_night = Column(Float, nullable=False)
    nights = Column(Integer, nullable=False)
    subtotal = Column(Float, nullable=False)

    reservation = relationship("Reservation", back_populates="reserved_rooms")
    room = relationship("Room", lazy="selectin")
