# services/dispatch_engine.py

"""
Dispatch engine - owns the job slot, the offer timer and the geo tracker
"""

import asyncio
import itertools
import logging
import random
from typing import Optional, Tuple, Union

from dispatch.core.config import Settings, settings as default_settings
from dispatch.core.errors import InvalidTransition, JobAlreadyActive, JobNotFound
from dispatch.models.event import AdminOverview, DispatchEvent, EventType
from dispatch.models.geo import GeoPoint, TechnicianState, TrackingSnapshot, require_coordinate_pair
from dispatch.models.job import Job, JobEvent, JobStatus, ServiceType, VehicleType
from dispatch.services.event_bus import EventBus
from dispatch.services.geo_tracker import GeoTracker
from dispatch.services.job_lifecycle import apply_event, new_job, utcnow
from dispatch.services.job_slot import JobSlot
from dispatch.services.offer_timer import OfferTimer

logger = logging.getLogger(__name__)

NO_TECHNICIAN_MESSAGE = "No online technicians found nearby."
SEARCHING_MESSAGE = "Searching for nearby technicians..."


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class DispatchEngine:
    """
    Single-slot dispatch engine.

    Every mutation of the slot, the positions and technician availability
    happens under one asyncio.Lock, shared with the offer timer and the
    tracker tick so neither can act on a job that has moved on.
    """

    def __init__(self, config: Optional[Settings] = None, rng: Optional[random.Random] = None):
        self.settings = config or default_settings
        self._lock = asyncio.Lock()
        self._slot = JobSlot()
        self._rng = rng or random.Random()
        self._ids = itertools.count(1)
        self._technician_online = True
        self.events = EventBus(queue_size=self.settings.event_queue_size)

        default_location = self.default_location
        self.tracker = GeoTracker(
            target=default_location,
            # Technician starts slightly away until a job or a location report moves them
            mover=GeoPoint(lat=default_location.lat + 0.01, lng=default_location.lng + 0.01),
            lock=self._lock,
            tick_interval=self.settings.tick_interval_seconds,
            step_fraction=self.settings.step_fraction,
            arrival_threshold=self.settings.arrival_threshold_deg,
            km_per_degree=self.settings.km_per_degree,
            average_speed_kmh=self.settings.average_speed_kmh
        )
        self.offer_timer = OfferTimer(
            delay=self.settings.offer_delay_seconds,
            lock=self._lock,
            is_available=lambda: self._technician_online,
            on_offer=self._offer_job,
            on_no_match=self._discard_unmatched
        )
        logger.info("DispatchEngine initialized")

    # ---------- Read accessors ----------

    @property
    def default_location(self) -> GeoPoint:
        return GeoPoint(lat=self.settings.default_lat, lng=self.settings.default_lng)

    @property
    def active_job(self) -> Optional[Job]:
        return self._slot.active

    @property
    def history(self) -> Tuple[Job, ...]:
        return self._slot.history

    @property
    def customer_position(self) -> GeoPoint:
        return self.tracker.target

    @property
    def technician_position(self) -> GeoPoint:
        return self.tracker.mover

    @property
    def technician_online(self) -> bool:
        return self._technician_online

    def technician_state(self) -> TechnicianState:
        return TechnicianState(
            technician_id=self.settings.technician_id,
            online=self._technician_online,
            position=self.tracker.mover
        )

    def tracking_snapshot(self) -> Optional[TrackingSnapshot]:
        job = self._slot.active
        if job is None:
            return None

        return TrackingSnapshot(
            job_id=job.id,
            status=job.status.value,
            customer=self.tracker.target,
            technician=self.tracker.mover,
            distance_km=round(self.tracker.distance_km(), 3),
            great_circle_km=round(self.tracker.great_circle_km(), 3),
            eta_minutes=self.tracker.eta_minutes(),
            arrived=self.tracker.has_arrived()
        )

    def overview(self) -> AdminOverview:
        history = self._slot.history
        active = self._slot.active
        return AdminOverview(
            active_job=active,
            active_jobs=1 if active else 0,
            completed_jobs=len(history),
            revenue=sum(job.price for job in history),
            technician_online=self._technician_online,
            recent_history=list(history[:self.settings.recent_history_size])
        )

    # ---------- Operations ----------

    async def create_job(
            self,
            service: ServiceType,
            vehicle: VehicleType,
            lat: Optional[float] = None,
            lng: Optional[float] = None,
            customer_id: Optional[str] = None
    ) -> Job:
        """Open a job in SEARCHING and arm the offer timer"""
        require_coordinate_pair(lat, lng)
        async with self._lock:
            current = self._slot.active
            if current is not None:
                logger.warning(f"create_job rejected, job {current.id} is still active")
                raise JobAlreadyActive(current.id)

            if lat is None:
                logger.info("No coordinates supplied, using default location")
                location = self.default_location
            else:
                location = GeoPoint(lat=lat, lng=lng)

            job = new_job(
                job_id=self._next_job_id(),
                customer_id=customer_id or self.settings.default_customer_id,
                service=ServiceType(service),
                vehicle=VehicleType(vehicle),
                location=location
            )
            self._slot.put(job)

            self.tracker.reset(target=location, mover=self._random_start(location))
            self.offer_timer.arm(job.id)

            logger.info(f"Created job {job.id}: {job.vehicle_type.value}/{job.service_type.value} at ({location.lat}, {location.lng}), price={job.price}")
            self._publish(EventType.JOB_UPDATED, job, SEARCHING_MESSAGE)
            return job

    async def update_status(self, job_id: str, event: JobEvent, otp: Optional[Union[str, int]] = None) -> Job:
        """Apply a customer/technician event to the active job"""
        event = JobEvent(event)

        async with self._lock:
            job = self._slot.active
            if job is None or job.id != job_id:
                logger.warning(f"update_status for unknown job {job_id}")
                raise JobNotFound(job_id)

            if event == JobEvent.OFFER:
                # Offers come from the matching timer only
                raise InvalidTransition(job.id, job.status, event)

            updated = apply_event(job, event, otp=otp, technician_id=self.settings.technician_id)

            if updated.status == JobStatus.COMPLETED:
                self.tracker.stop()
                self._slot.archive(updated)
                self._publish(EventType.JOB_UPDATED, updated)
                self._publish(EventType.HISTORY_APPENDED, updated)
                logger.info(f"Job {updated.id} completed and archived ({len(self._slot.history)} in history)")
                return updated

            self._slot.put(updated)
            self._publish(EventType.JOB_UPDATED, updated)

            if event == JobEvent.DECLINE:
                self._handle_decline(updated)
            elif updated.is_trackable:
                self.tracker.start(self._is_tracking)

            return updated

    async def cancel_job(self) -> None:
        """Customer cancels while the job is still searching"""
        async with self._lock:
            job = self._slot.active
            if job is None:
                raise JobNotFound()
            if job.status != JobStatus.SEARCHING:
                logger.warning(f"Cancel rejected for job {job.id} in status {job.status.value}")
                raise InvalidTransition(job.id, job.status, "cancel")

            self.offer_timer.cancel()
            self._slot.clear()

            cancelled = job.model_copy(update={"status": JobStatus.CANCELLED, "updated_at": utcnow()})
            logger.info(f"Job {job.id} cancelled by customer")
            self._publish(EventType.JOB_CANCELLED, cancelled)

    async def set_technician_online(
            self,
            online: bool,
            lat: Optional[float] = None,
            lng: Optional[float] = None
    ) -> TechnicianState:
        """Toggle availability; a reported location moves the technician"""
        require_coordinate_pair(lat, lng)
        async with self._lock:
            self._technician_online = online
            if online and lat is not None:
                self.tracker.relocate_mover(GeoPoint(lat=lat, lng=lng))
                logger.info(f"Technician online at ({lat}, {lng})")
            else:
                logger.info(f"Technician {'online' if online else 'offline'}")
            return self.technician_state()

    async def shutdown(self):
        async with self._lock:
            self.offer_timer.cancel()
            self.tracker.stop()
        logger.info("DispatchEngine shut down")

    # ---------- Internals (lock held) ----------

    def _next_job_id(self) -> str:
        return f"JOB-{next(self._ids):06d}"

    def _random_start(self, location: GeoPoint) -> GeoPoint:
        jitter = self.settings.technician_start_jitter_deg
        return GeoPoint(
            lat=_clamp(location.lat + self._rng.uniform(-jitter, jitter), -90.0, 90.0),
            lng=_clamp(location.lng + self._rng.uniform(-jitter, jitter), -180.0, 180.0)
        )

    def _is_tracking(self) -> bool:
        job = self._slot.active
        return job is not None and job.is_trackable

    def _handle_decline(self, job: Job):
        if self.settings.decline_policy == "requeue":
            logger.info(f"Job {job.id} declined, searching again")
            self.offer_timer.arm(job.id)
        else:
            logger.info(f"Job {job.id} declined, discarding")
            self._slot.clear()
            self._publish(EventType.NO_TECHNICIAN_FOUND, job, NO_TECHNICIAN_MESSAGE)

    async def _offer_job(self, job_id: str):
        job = self._slot.active
        if job is None or job.id != job_id:
            return
        updated = apply_event(job, JobEvent.OFFER)
        self._slot.put(updated)
        self._publish(EventType.JOB_UPDATED, updated)

    async def _discard_unmatched(self, job_id: str):
        job = self._slot.active
        if job is None or job.id != job_id:
            return
        self._slot.clear()
        logger.info(f"Job {job_id} discarded, no technician found")
        self._publish(EventType.NO_TECHNICIAN_FOUND, job, NO_TECHNICIAN_MESSAGE)

    def _publish(self, event_type: EventType, job: Optional[Job] = None, message: Optional[str] = None):
        self.events.publish(DispatchEvent(type=event_type, job=job, message=message))
