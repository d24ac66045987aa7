"""Best-effort side effects that run after the primary transaction commits"""

from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker
import structlog

from app.models.housekeeping import HousekeepingTask, HousekeepingStatus
from app.models.notification import Notification, NotificationType

logger = structlog.get_logger()


@dataclass(frozen=True)
class NotificationEvent:
    recipient_id: UUID
    message: str
    type: NotificationType = NotificationType.SYSTEM
    link: Optional[str] = None


async def publish_notification(session_factory: async_sessionmaker, event: NotificationEvent) -> None:
    """Store an in-app notification; never raises"""
    try:
        async with session_factory() as db:
            notification = Notification(
                recipient_id=event.recipient_id,
                message=event.message,
                type=event.type,
                link=event.link,
            )
            db.add(notification)
            await db.commit()
            logger.info(
                "Notification created",
                recipient_id=str(event.recipient_id),
                notification_id=str(notification.id),
            )
    except Exception as e:
        logger.error(
            "Failed to create notification",
            recipient_id=str(event.recipient_id),
            error=str(e),
        )


async def spawn_checkout_tasks(
    session_factory: async_sessionmaker,
    room_ids: Iterable[UUID],
    booking_code: str,
) -> None:
    """Open one cleaning task per vacated room; never raises"""
    room_ids = list(room_ids)
    try:
        async with session_factory() as db:
            for room_id in room_ids:
                db.add(HousekeepingTask(
                    room_id=room_id,
                    status=HousekeepingStatus.DIRTY,
                    task="Checkout Cleaning",
                    note=f"Automatic task from checkout of booking {booking_code}",
                ))
            await db.commit()
            logger.info("Checkout cleaning tasks created", booking_code=booking_code, rooms=len(room_ids))
    except Exception as e:
        logger.error(
            "Failed to create checkout cleaning tasks",
            booking_code=booking_code,
            error=str(e),
        )
