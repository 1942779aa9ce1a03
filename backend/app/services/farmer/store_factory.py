# backend/app/services/farmer/store_factory.py

"""
Picks the store adapters from settings.STORE_BACKEND (memory | sql).
One instance per process; routers reach them through FastAPI Depends.
"""

from app.core.config import settings
from app.core.logger import get_logger
from app.services.farmer.consultation_store import (
    InMemoryConsultationStore,
    SqlConsultationStore,
)
from app.services.farmer.measurement_store import (
    InMemoryMeasurementStore,
    SqlMeasurementStore,
)

logger = get_logger("stores")

_stores = {}


def _backend() -> str:
    backend = (settings.STORE_BACKEND or "memory").lower()
    if backend not in ("memory", "sql"):
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
    return backend


def get_consultation_store():
    if "consultations" not in _stores:
        backend = _backend()
        _stores["consultations"] = InMemoryConsultationStore() if backend == "memory" else SqlConsultationStore()
        logger.info("Consultation store ready (%s)", backend)
    return _stores["consultations"]


def get_measurement_store():
    if "measurements" not in _stores:
        backend = _backend()
        _stores["measurements"] = InMemoryMeasurementStore() if backend == "memory" else SqlMeasurementStore()
        logger.info("Measurement store ready (%s)", backend)
    return _stores["measurements"]


def reset_stores():
    """Drop cached adapters (tests, or after changing STORE_BACKEND)."""
    _stores.clear()
