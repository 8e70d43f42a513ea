"""
Tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from dispatch.core.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.average_speed_kmh == 40.0
    assert settings.decline_policy == "requeue"


@pytest.mark.parametrize("speed", [0, -5])
def test_average_speed_must_be_positive(speed):
    with pytest.raises(ValidationError):
        Settings(average_speed_kmh=speed)


def test_average_speed_from_environment(monkeypatch):
    monkeypatch.setenv("DISPATCH_API_AVERAGE_SPEED_KMH", "0")
    with pytest.raises(ValidationError):
        Settings()
