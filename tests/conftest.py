"""
Shared fixtures for the orchard advisory backend tests.

Run with: pytest -v
"""
import os

# keep test runs off the filesystem and on the in-memory stores
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("STORE_BACKEND", "memory")

from datetime import date, timedelta

import pytest

from app.schemas.farmer.weather import ForecastDay


def forecast(*overrides, start=date(2025, 4, 1)):
    """Build consecutive ForecastDays from dicts of overrides."""
    days = []
    for i, override in enumerate(overrides):
        base = {
            "date": start + timedelta(days=i),
            "temp_max": 24.0,
            "temp_min": 10.0,
            "precipitation": 0.0,
            "precipitation_prob": 10.0,
            "wind_speed": 8.0,
            "weathercode": 1,
        }
        base.update(override)
        days.append(ForecastDay(**base))
    return days


@pytest.fixture
def fresh_state():
    from app.services.farmer.consultation_service import _clear_sessions
    from app.services.farmer.store_factory import reset_stores

    reset_stores()
    _clear_sessions()
    yield
    reset_stores()
    _clear_sessions()


@pytest.fixture
def make_forecast():
    return forecast
