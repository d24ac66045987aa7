"""Notification schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: UUID
    recipient_id: UUID
    message: str
    type: NotificationType
    is_read: bool
    link: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
