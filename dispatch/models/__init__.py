# models/__init__.py

from .geo import GeoPoint, TrackingSnapshot, TechnicianState, AvailabilityRequest
from .job import (
    Job,
    JobStatus,
    JobEvent,
    ServiceType,
    VehicleType,
    JobCreateRequest,
    StatusUpdateRequest,
    PriceQuote,
    TRACKABLE_STATUSES
)
from .event import EventType, DispatchEvent, AdminOverview

__all__ = [
    'GeoPoint',
    'TrackingSnapshot',
    'TechnicianState',
    'AvailabilityRequest',
    'Job',
    'JobStatus',
    'JobEvent',
    'ServiceType',
    'VehicleType',
    'JobCreateRequest',
    'StatusUpdateRequest',
    'PriceQuote',
    'TRACKABLE_STATUSES',
    'EventType',
    'DispatchEvent',
    'AdminOverview'
]
