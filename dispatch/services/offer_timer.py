# services/offer_timer.py

"""
Offer timer - delayed, cancellable matching decision for a searching job
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

JobCallback = Callable[[str], Awaitable[None]]


class OfferTimer:
    """
    Fires once, `delay` seconds after `arm()`.

    At fire time it takes `lock`, checks it is still armed for the same job,
    then reads `is_available()` and awaits either `on_offer(job_id)` or
    `on_no_match(job_id)` with the lock held. `cancel()` must be called with
    the lock held; a fire that wakes up afterwards finds nothing armed.
    """

    def __init__(
            self,
            delay: float,
            lock: asyncio.Lock,
            is_available: Callable[[], bool],
            on_offer: JobCallback,
            on_no_match: JobCallback
    ):
        self.delay = delay
        self._lock = lock
        self._is_available = is_available
        self._on_offer = on_offer
        self._on_no_match = on_no_match
        self._armed_for: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def armed_for(self) -> Optional[str]:
        return self._armed_for

    def arm(self, job_id: str):
        if self._armed_for is not None:
            raise RuntimeError(f"Offer timer already armed for job {self._armed_for}")

        self._armed_for = job_id
        self._task = asyncio.create_task(self._run(job_id))
        logger.info(f"Offer timer armed for job {job_id} ({self.delay}s)")

    def cancel(self):
        if self._armed_for is None:
            return

        logger.info(f"Offer timer cancelled for job {self._armed_for}")
        self._armed_for = None
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _run(self, job_id: str):
        await asyncio.sleep(self.delay)

        async with self._lock:
            if self._armed_for != job_id:
                logger.debug(f"Stale offer timer for job {job_id} ignored")
                return

            self._armed_for = None
            self._task = None

            if self._is_available():
                logger.info(f"Technician available, offering job {job_id}")
                await self._on_offer(job_id)
            else:
                logger.info(f"No technician available for job {job_id}")
                await self._on_no_match(job_id)
