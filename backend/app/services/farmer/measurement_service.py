# backend/app/services/farmer/measurement_service.py

"""
Soil & water measurements: submission, decode, latest-sample lookup

Functionalities:
 - validate and record lab submissions (at least one value, date defaults to today)
 - decode raw store rows into typed Samples; malformed values become absent
 - pick the latest manual / analytics sample per field
 - per-nutrient history across all manual results (comparison view)
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence
import math

from app.core.logger import get_logger
from app.schemas.farmer.measurement import Sample, SoilTestCreate, WaterTestCreate
from app.services.farmer.reference_ranges import (
    SOIL_PARAMETERS,
    WATER_PARAMETERS,
    Family,
    normalize_metric,
)

logger = get_logger("measurements")

SOIL_KEYS = list(SOIL_PARAMETERS)
WATER_KEYS = list(WATER_PARAMETERS)


class EmptySubmissionError(ValueError):
    """A lab submission carried no measured value at all."""


# -------------------------------------------------------------
# DECODE
# -------------------------------------------------------------
def coerce_value(raw: Any) -> Optional[float]:
    """Numeric or absent; bools, blanks, junk and NaN are absent."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def coerce_date(raw: Any) -> Optional[date]:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw:
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            return None
    return None


def decode_soil_row(row: Dict[str, Any]) -> Optional[Sample]:
    recorded = coerce_date(row.get("recorded_date"))
    if recorded is None:
        return None
    return Sample(
        field_id=str(row.get("field_id", "")),
        family=Family.soil.value,
        source="manual",
        recorded_date=recorded,
        values={k: coerce_value(row.get(k)) for k in SOIL_KEYS},
    )


def decode_water_row(row: Dict[str, Any]) -> Optional[Sample]:
    recorded = coerce_date(row.get("test_date") or row.get("recorded_date"))
    if recorded is None:
        return None
    return Sample(
        field_id=str(row.get("field_id", "")),
        family=Family.water.value,
        source="manual",
        recorded_date=recorded,
        values={k: coerce_value(row.get(k)) for k in WATER_KEYS},
    )


def decode_analytics_rows(rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Typed readings, newest first; rows without a usable date are dropped."""
    readings = []
    for row in rows:
        recorded = coerce_date(row.get("recorded_date"))
        metric = row.get("metric_type")
        if recorded is None or not metric:
            continue
        readings.append({
            "field_id": str(row.get("field_id", "")),
            "metric": normalize_metric(metric),
            "value": coerce_value(row.get("metric_value")),
            "recorded_date": recorded,
        })
    readings.sort(key=lambda r: r["recorded_date"], reverse=True)
    return readings


def analytics_sample(readings: Sequence[Dict[str, Any]], field_id: str) -> Optional[Sample]:
    """All readings sharing the newest analytics date form one soil sample."""
    if not readings:
        return None
    newest = readings[0]["recorded_date"]
    values: Dict[str, Optional[float]] = {}
    for r in readings:
        if r["recorded_date"] != newest:
            break
        values.setdefault(r["metric"], r["value"])
    return Sample(
        field_id=field_id,
        family=Family.soil.value,
        source="analytics",
        recorded_date=newest,
        values=values,
    )


# -------------------------------------------------------------
# SUBMISSION
# -------------------------------------------------------------
def _clean(payload, keys) -> Dict[str, Optional[float]]:
    # NaN and infinities are absent, so they never count towards "at least one value"
    return {k: coerce_value(getattr(payload, k)) for k in keys}


def _populated(values: Dict[str, Optional[float]]) -> bool:
    return any(v is not None for v in values.values())


async def record_soil_test(store, field_id: str, payload: SoilTestCreate) -> Sample:
    values = _clean(payload, SOIL_KEYS)
    if not _populated(values):
        raise EmptySubmissionError("Please enter at least one value.")

    recorded = payload.recorded_date or date.today()
    row = await store.insert_soil_result(field_id, payload.user_id, recorded, values)
    logger.info("Soil test recorded", extra={"field_id": field_id, "user_id": payload.user_id})
    return decode_soil_row(row)


async def record_water_test(store, field_id: str, payload: WaterTestCreate) -> Sample:
    values = _clean(payload, WATER_KEYS)
    if not _populated(values):
        raise EmptySubmissionError("Please enter at least one value.")

    recorded = payload.recorded_date or date.today()
    row = await store.insert_water_result(field_id, payload.user_id, recorded, values, payload.report_url)
    logger.info("Water test recorded", extra={"field_id": field_id, "user_id": payload.user_id})
    return decode_water_row(row)


# -------------------------------------------------------------
# LOOKUPS
# -------------------------------------------------------------
async def latest_manual_sample(store, field_id: str, family) -> Optional[Sample]:
    if Family(family) is Family.soil:
        rows = await store.latest_soil_results(field_id, limit=1)
        decode = decode_soil_row
    else:
        rows = await store.latest_water_results(field_id, limit=1)
        decode = decode_water_row
    return decode(rows[0]) if rows else None


async def analytics_history(store, field_id: str) -> List[Dict[str, Any]]:
    return decode_analytics_rows(await store.list_analytics(field_id))


async def nutrient_history(store, field_id: str) -> Dict[str, Any]:
    """
    Every manual soil result for the field, newest first, pivoted per
    nutrient for side-by-side comparison.
    """
    samples = [s for s in map(decode_soil_row, await store.latest_soil_results(field_id)) if s]
    return {
        "field_id": field_id,
        "dates": [s.recorded_date for s in samples],
        "nutrients": {
            key: [s.values.get(key) for s in samples]
            for key in SOIL_KEYS
        },
    }
