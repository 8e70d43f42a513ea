# routers/job_router.py

"""
Job Lifecycle API Routes
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from dispatch.core.dependencies import get_engine, to_http_error
from dispatch.core.errors import DispatchError
from dispatch.models.geo import TrackingSnapshot
from dispatch.models.job import (
    Job,
    JobCreateRequest,
    PriceQuote,
    ServiceType,
    StatusUpdateRequest,
    VehicleType
)
from dispatch.services.dispatch_engine import DispatchEngine
from dispatch.services.pricing import quote_price

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


@router.get("/quote", response_model=PriceQuote)
async def get_quote(
        service_type: ServiceType = Query(..., description="Requested repair"),
        vehicle_type: VehicleType = Query(..., description="Customer vehicle")
):
    """Price estimate shown before requesting a technician"""
    return PriceQuote(
        service_type=service_type,
        vehicle_type=vehicle_type,
        price=quote_price(service_type, vehicle_type)
    )


@router.post("", response_model=Job, status_code=201)
async def create_job(request: JobCreateRequest, engine: DispatchEngine = Depends(get_engine)):
    """Request a technician"""
    logger.info(f"POST /api/jobs - {request.vehicle_type.value}/{request.service_type.value}")
    try:
        return await engine.create_job(
            service=request.service_type,
            vehicle=request.vehicle_type,
            lat=request.lat,
            lng=request.lng,
            customer_id=request.customer_id
        )
    except DispatchError as e:
        raise to_http_error(e)


@router.get("/active", response_model=Job)
async def get_active_job(engine: DispatchEngine = Depends(get_engine)):
    """Get the job currently in progress"""
    job = engine.active_job

    if not job:
        raise HTTPException(status_code=404, detail="No active job")

    return job


@router.delete("/active", status_code=204)
async def cancel_job(engine: DispatchEngine = Depends(get_engine)):
    """Cancel the searching job"""
    logger.info("DELETE /api/jobs/active - Cancelling job")
    try:
        await engine.cancel_job()
    except DispatchError as e:
        raise to_http_error(e)


@router.get("/active/tracking", response_model=TrackingSnapshot)
async def get_tracking(engine: DispatchEngine = Depends(get_engine)):
    """Live technician position, distance and ETA"""
    snapshot = engine.tracking_snapshot()

    if not snapshot:
        raise HTTPException(status_code=404, detail="No active job")

    return snapshot


@router.get("/history", response_model=List[Job])
async def get_history(engine: DispatchEngine = Depends(get_engine)):
    """Completed jobs, most recent first"""
    return list(engine.history)


@router.post("/{job_id}/events", response_model=Job)
async def update_job_status(
        job_id: str,
        request: StatusUpdateRequest,
        engine: DispatchEngine = Depends(get_engine)
):
    """Apply a lifecycle event to the active job"""
    logger.info(f"POST /api/jobs/{job_id}/events - event='{request.event.value}'")
    try:
        return await engine.update_status(job_id, request.event, otp=request.otp)
    except DispatchError as e:
        raise to_http_error(e)
