# routers/admin_router.py

"""
Admin API Routes
"""

from fastapi import APIRouter, Depends

from dispatch.core.dependencies import get_engine
from dispatch.models.event import AdminOverview
from dispatch.services.dispatch_engine import DispatchEngine

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/overview", response_model=AdminOverview)
async def get_overview(engine: DispatchEngine = Depends(get_engine)):
    """Live job, completed count and revenue"""
    return engine.overview()
