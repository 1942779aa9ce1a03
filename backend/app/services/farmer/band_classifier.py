# backend/app/services/farmer/band_classifier.py

"""
Band Classifier (pure)

Maps a measured value onto a RAG band around the parameter's optimal range:
 - green : inside [min, max]
 - amber : within margin_fraction * (max - min) outside either edge
 - red   : further outside
 - gray  : no value (never conflated with red)
"""

from typing import Iterable, Optional, Tuple
import enum
import math

from app.core.config import settings
from app.schemas.farmer.advisory import ClassificationResult
from app.services.farmer.reference_ranges import (
    Direction,
    ParameterDefinition,
    advisory_for,
)


class BandStatus(str, enum.Enum):
    green = "green"
    amber = "amber"
    red = "red"
    gray = "gray"


# higher is worse; gray only wins when nothing else is known
SEVERITY = {
    BandStatus.gray: 0,
    BandStatus.green: 1,
    BandStatus.amber: 2,
    BandStatus.red: 3,
}

DEFAULT_MARGIN_FRACTION = settings.BAND_MARGIN_FRACTION


def _is_absent(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def classify(
    value: Optional[float],
    green_range: Tuple[float, float],
    margin_fraction: float = DEFAULT_MARGIN_FRACTION,
) -> BandStatus:
    if _is_absent(value):
        return BandStatus.gray

    lo, hi = green_range
    if lo <= value <= hi:
        return BandStatus.green

    # zero-width band gives a zero margin: green straight to red
    margin = max(hi - lo, 0.0) * margin_fraction
    if lo - margin <= value < lo or hi < value <= hi + margin:
        return BandStatus.amber
    return BandStatus.red


def direction_of(value: float, green_range: Tuple[float, float]) -> Optional[Direction]:
    lo, hi = green_range
    if value < lo:
        return Direction.deficiency
    if value > hi:
        return Direction.excess
    return None


def classify_parameter(
    definition: ParameterDefinition,
    value: Optional[float],
    margin_fraction: float = DEFAULT_MARGIN_FRACTION,
) -> ClassificationResult:
    status = classify(value, definition.green, margin_fraction)
    advisory = ""
    if status in (BandStatus.amber, BandStatus.red):
        advisory = advisory_for(definition.key, direction_of(value, definition.green))

    return ClassificationResult(
        parameter=definition.key,
        label=definition.label,
        unit=definition.unit,
        value=None if _is_absent(value) else value,
        status=status.value,
        advisory=advisory,
    )


def worst_status(statuses: Iterable) -> BandStatus:
    worst = BandStatus.gray
    for s in statuses:
        s = BandStatus(s)
        if SEVERITY[s] > SEVERITY[worst]:
            worst = s
    return worst
