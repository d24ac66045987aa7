"""In-process reservation expiry loop"""

import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker
import structlog

from app.services.reservations import expire_stale_reservations

logger = structlog.get_logger()


class ReservationExpirySweeper:
    """Periodically persists expiry of lapsed holds while the API is running"""

    def __init__(self, session_factory: async_sessionmaker, interval_seconds: float = 60.0):
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        async with self.session_factory() as db:
            return await expire_stale_reservations(db)

    async def _run(self) -> None:
        while True:
            try:
                await self.sweep_once()
            except Exception as e:
                logger.error("Reservation sweep failed", error=str(e))
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Reservation sweeper started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reservation sweeper stopped")
