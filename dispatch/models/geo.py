# models/geo.py

"""
Position-related data models
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


def require_coordinate_pair(lat: Optional[float], lng: Optional[float]):
    """Coordinates come as a full pair or not at all"""
    if (lat is None) != (lng is None):
        raise ValueError("lat and lng must be given together")


class TrackingSnapshot(BaseModel):
    job_id: str
    status: str
    customer: GeoPoint
    technician: GeoPoint
    distance_km: float
    great_circle_km: float
    eta_minutes: int
    arrived: bool


class TechnicianState(BaseModel):
    technician_id: str
    online: bool
    position: GeoPoint


class AvailabilityRequest(BaseModel):
    online: bool = Field(..., description="Whether the technician accepts offers")
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Reported latitude, keeps current position when omitted")
    lng: Optional[float] = Field(None, ge=-180, le=180, description="Reported longitude, keeps current position when omitted")

    @model_validator(mode="after")
    def check_coordinates(self):
        require_coordinate_pair(self.lat, self.lng)
        return self
