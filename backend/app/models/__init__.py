from .farmer.consultation import (
    Consultation,
    Prescription,
    PrescriptionActionItem,
)
from .farmer.measurement import (
    Field,
    SoilTestResult,
    WaterTestResult,
    FieldAnalytic,
)
from ..core.database import Base
__all__ = [
    "Consultation",
    "Prescription",
    "PrescriptionActionItem",
    "Field",
    "SoilTestResult",
    "WaterTestResult",
    "FieldAnalytic",
    "Base"
]
