"""Background job tasks"""

import asyncio
import structlog

from app.jobs.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


@celery_app.task(name="expire_stale_reservations")
def expire_stale_reservations():
    """Persist expiry for pending holds whose deadline has passed"""
    logger.info("Sweeping stale reservations")

    async def _sweep():
        from app.database import SessionLocal, engine
        from app.services import reservations as reservation_service

        try:
            async with SessionLocal() as db:
                return await reservation_service.expire_stale_reservations(db)
        finally:
            # Pooled connections are bound to this task's event loop
            await engine.dispose()

    expired = run_async(_sweep())
    logger.info("Reservation sweep finished", expired=expired)
    return expired
