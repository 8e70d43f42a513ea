# core/dependencies.py

"""
FastAPI dependencies
"""

from fastapi import HTTPException, Request

from dispatch.core.errors import DispatchError, InvalidTransition, JobAlreadyActive, JobNotFound, OtpMismatch
from dispatch.services.dispatch_engine import DispatchEngine


def get_engine(request: Request) -> DispatchEngine:
    """The engine owned by the running app"""
    return request.app.state.engine


def to_http_error(error: DispatchError) -> HTTPException:
    """Map a dispatch rejection to an HTTP error"""
    if isinstance(error, JobNotFound):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, OtpMismatch):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, (InvalidTransition, JobAlreadyActive)):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
