"""Room registry models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base, EnumType


class RoomStatus(str, enum.Enum):
    """Operational status of a physical room"""
    AVAILABLE = "available"
    RESERVED = "reserved"
    OCCUPIED = "occupied"
    CLEANING = "cleaning"
    DIRTY = "dirty"
    MAINTENANCE = "maintenance"


class RoomType(Base):
    """Catalog entry shared by rooms of the same kind"""
    __tablename__ = "room_types"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)

    # Pricing
    base_price = Column(Float, nullable=False)
    discount = Column(Float, default=0, nullable=False)  # percent

    # Occupancy limits
    max_adults = Column(Integer, default=2, nullable=False)
    max_children = Column(Integer, default=0, nullable=False)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    rooms = relationship("Room", back_populates="room_type")


class Room(Base):
    """Individual physical room"""
    __tablename__ = "rooms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_number = Column(String(20), unique=True, nullable=False)
    room_type_id = Column(UUID(as_uuid=True), ForeignKey("room_types.id"), nullable=False, index=True)
    floor = Column(Integer, nullable=False)
    status = Column(EnumType(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    room_type = relationship("RoomType", back_populates="rooms", lazy="selectin")
