"""Audit log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class AuditLog(Base):
    """Audit trail for staff-driven status changes"""
    __tablename__ = "audit_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Actor information
    actor_id = Column(UUID(as_uuid=True))  # User ID or null for system
    actor_type = Column(String(50))  # user, system
    actor_name = Column(String(255))

    # Action details
    action = Column(String(100), nullable=False)  # update_booking_status, confirm_payment, etc.
    resource_type = Column(String(50))  # booking, reservation, room
    resource_id = Column(UUID(as_uuid=True))

    # Change data
    data_json = Column(JSON)  # {"before": ..., "after": ...}

    created_at = Column(DateTime, default=datetime.utcnow)
