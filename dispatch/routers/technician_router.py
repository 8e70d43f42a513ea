# routers/technician_router.py

"""
Technician API Routes
"""

import logging
from fastapi import APIRouter, Depends

from dispatch.core.dependencies import get_engine
from dispatch.models.geo import AvailabilityRequest, TechnicianState
from dispatch.services.dispatch_engine import DispatchEngine

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/technician", tags=["Technician"])


@router.get("", response_model=TechnicianState)
async def get_technician(engine: DispatchEngine = Depends(get_engine)):
    """Availability and current position"""
    return engine.technician_state()


@router.put("/availability", response_model=TechnicianState)
async def set_availability(request: AvailabilityRequest, engine: DispatchEngine = Depends(get_engine)):
    """Go online or offline"""
    logger.info(f"PUT /api/technician/availability - online={request.online}")
    return await engine.set_technician_online(request.online, lat=request.lat, lng=request.lng)
