"""Housekeeping task model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from app.database import Base, EnumType


class HousekeepingStatus(str, enum.Enum):
    DIRTY = "dirty"
    CLEANING = "cleaning"
    CLEAN = "clean"
    OUT_OF_SERVICE = "out_of_service"


class HousekeepingTask(Base):
    """Cleaning work item for one room"""
    __tablename__ = "housekeeping_tasks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_id = Column(UUID(as_uuid=True), ForeignKey("rooms.id"), nullable=False, index=True)
    staff_id = Column(UUID(as_uuid=True), ForeignKey("users.id"))
    status = Column(EnumType(HousekeepingStatus), nullable=False)
    task = Column(String(100), nullable=False, default="Routine Cleaning")
    note = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room", lazy="selectin")
