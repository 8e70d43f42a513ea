# services/geo_tracker.py

"""
Geo tracker - customer/technician positions and the simulated approach
"""

import asyncio
import logging
from typing import Callable, Optional

from dispatch.models.geo import GeoPoint
from dispatch.utils.geo import planar_distance, degrees_to_km, haversine_km, eta_minutes

logger = logging.getLogger(__name__)


class GeoTracker:
    """
    Holds the stationary target (service location) and the moving technician.

    While tracking, a periodic task takes `lock` every `tick_interval`
    seconds, re-checks `should_track()` and moves the technician a fixed
    fraction of the remaining way. It never overshoots and stops moving once
    within `arrival_threshold` degrees.
    """

    def __init__(
            self,
            target: GeoPoint,
            mover: GeoPoint,
            lock: asyncio.Lock,
            tick_interval: float = 1.0,
            step_fraction: float = 0.05,
            arrival_threshold: float = 0.0005,
            km_per_degree: float = 111.0,
            average_speed_kmh: float = 40.0
    ):
        if not 0 < step_fraction <= 1:
            raise ValueError(f"step_fraction must be in (0, 1], got {step_fraction}")

        self.target = target
        self.mover = mover
        self.tick_interval = tick_interval
        self.step_fraction = step_fraction
        self.arrival_threshold = arrival_threshold
        self.km_per_degree = km_per_degree
        self.average_speed_kmh = average_speed_kmh
        self._lock = lock
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    # ---------- Positions ----------

    def reset(self, target: GeoPoint, mover: GeoPoint):
        self.target = target
        self.mover = mover
        self.ticks = 0
        logger.debug(f"Tracker reset: target={target}, mover={mover}")

    def relocate_mover(self, point: GeoPoint):
        self.mover = point

    def distance_deg(self) -> float:
        return planar_distance(self.mover, self.target)

    def distance_km(self) -> float:
        return degrees_to_km(self.distance_deg(), self.km_per_degree)

    def great_circle_km(self) -> float:
        return haversine_km(self.mover, self.target)

    def has_arrived(self) -> bool:
        return self.distance_deg() < self.arrival_threshold

    def eta_minutes(self) -> int:
        if self.has_arrived():
            return 0
        return eta_minutes(self.distance_km(), self.average_speed_kmh)

    def step(self) -> bool:
        """Advance the mover once; returns False when frozen at the target"""
        if self.has_arrived():
            return False

        prev = self.mover
        self.mover = GeoPoint(
            lat=prev.lat + (self.target.lat - prev.lat) * self.step_fraction,
            lng=prev.lng + (self.target.lng - prev.lng) * self.step_fraction
        )
        self.ticks += 1
        logger.debug(f"Tick {self.ticks}: {self.distance_km():.3f} km to target")
        return True

    # ---------- Periodic task ----------

    @property
    def is_running(self) -> bool:
        return self._task is not None

    def start(self, should_track: Callable[[], bool]):
        """Begin ticking; no-op when already running"""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run(should_track))
        logger.info(f"Tracking started (every {self.tick_interval}s)")

    def stop(self):
        """Stop ticking; call with the lock held"""
        task, self._task = self._task, None
        if task is None:
            return
        if task is not asyncio.current_task():
            task.cancel()
        logger.info(f"Tracking stopped after {self.ticks} ticks")

    async def _run(self, should_track: Callable[[], bool]):
        while True:
            await asyncio.sleep(self.tick_interval)
            async with self._lock:
                if self._task is not asyncio.current_task() or not should_track():
                    if self._task is asyncio.current_task():
                        self._task = None
                    return
                self.step()
