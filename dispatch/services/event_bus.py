# services/event_bus.py

"""
Event bus - fire-and-forget fan-out of dispatch notifications
"""

import asyncio
import logging
from typing import List

from dispatch.models.event import DispatchEvent

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: List[asyncio.Queue] = []

    def subscribe(self) -> asyncio.Queue:
        """Register a new subscriber queue"""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.append(queue)
        logger.debug(f"Subscriber added ({len(self._subscribers)} total)")
        return queue

    def unsubscribe(self, queue: asyncio.Queue):
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            logger.debug(f"Subscriber removed ({len(self._subscribers)} total)")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: DispatchEvent):
        """Deliver to every subscriber without waiting; full queues drop the event"""
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Subscriber queue full, dropping '{event.type.value}' event")
