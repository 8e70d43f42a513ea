# models/job.py

"""
Job-related data models
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Union
from datetime import datetime
from enum import Enum

from dispatch.models.geo import GeoPoint, require_coordinate_pair


class JobStatus(str, Enum):
    SEARCHING = "SEARCHING"
    OFFERED = "OFFERED"
    ACCEPTED = "ACCEPTED"
    ARRIVED = "ARRIVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses during which the technician position is simulated
TRACKABLE_STATUSES = frozenset({
    JobStatus.ACCEPTED,
    JobStatus.ARRIVED,
    JobStatus.IN_PROGRESS,
})


class JobEvent(str, Enum):
    OFFER = "offer"
    ACCEPT = "accept"
    DECLINE = "decline"
    ARRIVE = "arrive"
    START = "start"
    COMPLETE = "complete"


class ServiceType(str, Enum):
    TUBE_PATCH = "TUBE_PATCH"
    TUBELESS_PLUG = "TUBELESS_PLUG"
    TOW = "TOW"


class VehicleType(str, Enum):
    BIKE = "BIKE"
    CAR = "CAR"


class Job(BaseModel):
    # Transitions build a new value with model_copy, history entries stay untouched
    model_config = ConfigDict(frozen=True)

    id: str
    customer_id: str
    technician_id: Optional[str] = None
    status: JobStatus = JobStatus.SEARCHING
    service_type: ServiceType
    vehicle_type: VehicleType
    location: GeoPoint
    price: int
    otp: str = Field(..., pattern=r"^\d{4}$")
    created_at: datetime
    updated_at: datetime

    @property
    def is_trackable(self) -> bool:
        return self.status in TRACKABLE_STATUSES


class JobCreateRequest(BaseModel):
    service_type: ServiceType = Field(..., description="Requested repair")
    vehicle_type: VehicleType = Field(..., description="Customer vehicle")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Service latitude (default location when omitted)")
    lng: Optional[float] = Field(None, ge=-180, le=180, description="Service longitude (default location when omitted)")
    customer_id: Optional[str] = Field(None, min_length=1, description="Customer identifier")

    @model_validator(mode="after")
    def check_coordinates(self):
        require_coordinate_pair(self.lat, self.lng)
        return self


class StatusUpdateRequest(BaseModel):
    event: JobEvent = Field(..., description="Lifecycle event to apply")
    otp: Optional[Union[str, int]] = Field(None, description="Customer OTP, required to complete")


class PriceQuote(BaseModel):
    service_type: ServiceType
    vehicle_type: VehicleType
    price: int
