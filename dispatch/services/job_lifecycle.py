# services/job_lifecycle.py

"""
Job lifecycle state machine - validates and applies status transitions
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple, Union

from dispatch.core.errors import InvalidTransition, OtpMismatch
from dispatch.models.geo import GeoPoint
from dispatch.models.job import Job, JobEvent, JobStatus, ServiceType, VehicleType
from dispatch.services.pricing import quote_price

logger = logging.getLogger(__name__)


# (current status, event) -> next status; anything missing is illegal
TRANSITIONS: Dict[Tuple[JobStatus, JobEvent], JobStatus] = {
    (JobStatus.SEARCHING, JobEvent.OFFER): JobStatus.OFFERED,
    (JobStatus.OFFERED, JobEvent.DECLINE): JobStatus.SEARCHING,
    (JobStatus.OFFERED, JobEvent.ACCEPT): JobStatus.ACCEPTED,
    (JobStatus.ACCEPTED, JobEvent.ARRIVE): JobStatus.ARRIVED,
    (JobStatus.ARRIVED, JobEvent.START): JobStatus.IN_PROGRESS,
    (JobStatus.IN_PROGRESS, JobEvent.COMPLETE): JobStatus.COMPLETED,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_otp() -> str:
    """4-digit code in 1000-9999"""
    return str(1000 + secrets.randbelow(9000))


def new_job(
        job_id: str,
        customer_id: str,
        service: ServiceType,
        vehicle: VehicleType,
        location: GeoPoint,
        now: Optional[datetime] = None
) -> Job:
    """Build a job in SEARCHING with its price and OTP fixed"""
    now = now or utcnow()
    return Job(
        id=job_id,
        customer_id=customer_id,
        technician_id=None,
        status=JobStatus.SEARCHING,
        service_type=service,
        vehicle_type=vehicle,
        location=location,
        price=quote_price(service, vehicle),
        otp=generate_otp(),
        created_at=now,
        updated_at=now
    )


def can_apply(job: Job, event: JobEvent) -> bool:
    return (job.status, event) in TRANSITIONS


def apply_event(
        job: Job,
        event: JobEvent,
        otp: Optional[Union[str, int]] = None,
        technician_id: Optional[str] = None,
        now: Optional[datetime] = None
) -> Job:
    """
    Return the job after applying `event`.

    The input job is never modified; a rejected event raises before any
    new value is built.
    """
    next_status = TRANSITIONS.get((job.status, event))
    if next_status is None:
        logger.warning(f"Rejected '{event.value}' for job {job.id} in status {job.status.value}")
        raise InvalidTransition(job.id, job.status, event)

    update = {"status": next_status, "updated_at": now or utcnow()}

    if event == JobEvent.ACCEPT:
        if not technician_id:
            raise ValueError("technician_id is required to accept a job")
        update["technician_id"] = technician_id

    if event == JobEvent.COMPLETE and (otp is None or str(otp) != job.otp):
        logger.warning(f"OTP mismatch for job {job.id}")
        raise OtpMismatch(job.id)

    logger.info(f"Job {job.id}: {job.status.value} -> {next_status.value} ({event.value})")
    return job.model_copy(update=update)
