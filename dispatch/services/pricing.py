# services/pricing.py

"""
Pricing table - fixed price per (vehicle, service) pair
"""

from itertools import product
from typing import Dict, Tuple

from dispatch.models.job import ServiceType, VehicleType

PRICE_TABLE: Dict[Tuple[VehicleType, ServiceType], int] = {
    (VehicleType.BIKE, ServiceType.TUBE_PATCH): 150,
    (VehicleType.BIKE, ServiceType.TUBELESS_PLUG): 200,
    (VehicleType.BIKE, ServiceType.TOW): 1500,
    (VehicleType.CAR, ServiceType.TUBE_PATCH): 400,
    (VehicleType.CAR, ServiceType.TUBELESS_PLUG): 500,
    (VehicleType.CAR, ServiceType.TOW): 3000,
}

_missing = set(product(VehicleType, ServiceType)) - set(PRICE_TABLE)
if _missing:
    raise RuntimeError(f"Price table is missing combinations: {sorted(_missing)}")


def quote_price(service: ServiceType, vehicle: VehicleType) -> int:
    """Price for a service on a vehicle"""
    return PRICE_TABLE[(VehicleType(vehicle), ServiceType(service))]
