import random

import pytest

from dispatch.core.config import Settings
from dispatch.services.dispatch_engine import DispatchEngine

OFFER_DELAY = 0.1
TICK = 0.01


@pytest.fixture
def fast_settings():
    """Settings with short timers so lifecycle tests run quickly."""
    return Settings(offer_delay_seconds=OFFER_DELAY, tick_interval_seconds=TICK)


@pytest.fixture
def engine(fast_settings):
    return DispatchEngine(fast_settings, rng=random.Random(7))


@pytest.fixture
def requeue_engine(fast_settings):
    return DispatchEngine(fast_settings.model_copy(update={"decline_policy": "requeue"}))


@pytest.fixture
def discard_engine(fast_settings):
    return DispatchEngine(fast_settings.model_copy(update={"decline_policy": "discard"}))
