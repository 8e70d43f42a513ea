# utils/geo.py

"""
Distance helpers
"""

import math

from dispatch.models.geo import GeoPoint

EARTH_RADIUS_KM = 6371.0


def planar_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Euclidean distance in raw coordinate degrees"""
    return math.hypot(a.lat - b.lat, a.lng - b.lng)


def degrees_to_km(degrees: float, km_per_degree: float = 111.0) -> float:
    """Flat-earth conversion, only meaningful for short distances"""
    return degrees * km_per_degree


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometers"""
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def eta_minutes(distance_km: float, average_speed_kmh: float) -> int:
    """Rough ETA, never below one minute while there is distance left"""
    if distance_km <= 0:
        return 0
    return max(1, int(distance_km / average_speed_kmh * 60))
