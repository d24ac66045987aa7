"""Booking (firm reservation) model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base, EnumType


class BookingStatus(str, enum.Enum):
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CONFIRMED_UNPAID = "confirmed_unpaid"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


# Statuses that keep the booked rooms allocated
ACTIVE_BOOKING_STATUSES = (
    BookingStatus.PENDING_PAYMENT,
    BookingStatus.CONFIRMED,
    BookingStatus.CONFIRMED_UNPAID,
    BookingStatus.CHECKED_IN,
)


class Booking(Base):
    """Payment-backed allocation of rooms for a stay"""
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_code = Column(String(20), unique=True, nullable=False)
    reservation_id = Column(UUID(as_uuid=True), ForeignKey("reservations.id"), unique=True)
    guest_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Stay
    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    adults_count = Column(Integer, nullable=False)
    children_count = Column(Integer, nullable=False, default=0)

    # Pricing
    subtotal_amount = Column(Float, nullable=False)
    tax_amount = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)

    # Status
    status = Column(EnumType(BookingStatus), default=BookingStatus.PENDING_PAYMENT, nullable=False, index=True)

    # Payment is created after the booking row, inside the same transaction
    payment_id = Column(UUID(as_uuid=True), ForeignKey("payments.id", use_alter=True, name="fk_bookings_payment_id"))

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guest = relationship("User", back_populates="bookings")
    payment = relationship("Payment", foreign_keys=[payment_id], lazy="selectin")
    booked_rooms = relationship(
        "BookedRoom",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def room_ids(self):
        return [line.room_id for line in self.booked_rooms]


class BookedRoom(Base):
    """Room line owned by a booking"""
    __tablename__ = "booked_rooms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_id = Column(UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True)
    price_per_night = Column(Float, nullable=False)
    nights = Column(Integer, nullable=False)
    subtotal = Column(Float, nullable=False)

    booking = relationship("Booking", back_populates="booked_rooms")
    room = relationship("Room", lazy="selectin")
