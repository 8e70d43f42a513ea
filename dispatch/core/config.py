# core/config.py

"""
Application Configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    app_name: str = "Roadside Dispatch API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Settings
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8000

    # Matching Settings
    offer_delay_seconds: float = 3.0
    decline_policy: Literal["requeue", "discard"] = "requeue"
    technician_id: str = "tech_001"
    default_customer_id: str = "cust_123"

    # Tracking Settings
    tick_interval_seconds: float = 1.0
    step_fraction: float = 0.05
    arrival_threshold_deg: float = 0.0005
    km_per_degree: float = 111.0
    average_speed_kmh: float = Field(40.0, gt=0)
    technician_start_jitter_deg: float = 0.005

    # Fallback location (Liberty Market, Lahore)
    default_lat: float = 31.5102
    default_lng: float = 74.3441

    # Event Settings
    event_queue_size: int = 100
    recent_history_size: int = 3

    class Config:
        env_prefix = "DISPATCH_API_"
        case_sensitive = False


settings = Settings()
