# models/event.py

"""
Notification models published to subscribers
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum

from dispatch.models.job import Job


class EventType(str, Enum):
    JOB_UPDATED = "job_updated"
    HISTORY_APPENDED = "history_appended"
    NO_TECHNICIAN_FOUND = "no_technician_found"
    JOB_CANCELLED = "job_cancelled"


class DispatchEvent(BaseModel):
    type: EventType
    job: Optional[Job] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AdminOverview(BaseModel):
    active_job: Optional[Job] = None
    active_jobs: int
    completed_jobs: int
    revenue: int
    technician_online: bool
    recent_history: List[Job] = []
