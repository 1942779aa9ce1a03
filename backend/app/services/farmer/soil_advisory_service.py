# backend/app/services/farmer/soil_advisory_service.py

"""
Advisory Aggregator (soil & water)

Two deliberately separate views over a field's measurements:

 1. summary  : latest sample only, binary in/out of the green band
               -> "lacking" (below min) / "excess" (above max)
 2. alerts   : most recent value per metric over the whole analytics
               history, run through the band classifier, so amber shows up

Plus:
 - latest-sample selection between manual lab entries and analytics
 - a deduplicated, capped action list (red advisories before amber)
 - latest-test summary across all of a grower's fields
 - health RAG matrix for the dashboard (soil / water / pest)
"""

from typing import Any, Dict, List, Optional, Sequence

from app.core.config import settings
from app.schemas.farmer.advisory import (
    ClassificationResult,
    FieldAdvisory,
    HealthMatrix,
    SampleSummary,
    SummaryEntry,
    TopSummary,
)
from app.schemas.farmer.measurement import Sample
from app.services.farmer.band_classifier import (
    BandStatus,
    classify_parameter,
    worst_status,
)
from app.services.farmer.measurement_service import (
    analytics_history,
    analytics_sample,
    latest_manual_sample,
)
from app.services.farmer.reference_ranges import (
    ParameterDefinition,
    Family,
    SOIL_PARAMETERS,
    get_table,
)


# -------------------------------------------------------------
# LATEST SAMPLE
# -------------------------------------------------------------
def select_latest_sample(manual: Optional[Sample], analytics: Optional[Sample]) -> Optional[Sample]:
    """Analytics wins only when strictly newer; ties go to the lab entry."""
    if analytics is not None and (manual is None or analytics.recorded_date > manual.recorded_date):
        return analytics
    return manual


# -------------------------------------------------------------
# SUMMARY VIEW (binary)
# -------------------------------------------------------------
def summarize_sample(
    sample: Optional[Sample],
    table: Optional[Dict[str, ParameterDefinition]] = None,
) -> SampleSummary:
    summary = SampleSummary()
    if sample is None:
        return summary

    table = table if table is not None else get_table(sample.family)
    for key, param in table.items():
        value = sample.values.get(key)
        if value is None:
            continue
        entry = SummaryEntry(key=key, label=param.label, value=value, unit=param.unit)
        lo, hi = param.green
        if value < lo:
            summary.lacking.append(entry)
        elif value > hi:
            summary.excess.append(entry)
    return summary


def classify_sample(
    sample: Optional[Sample],
    table: Optional[Dict[str, ParameterDefinition]] = None,
) -> List[ClassificationResult]:
    """Every parameter of the family, gray where the sample has no value."""
    if sample is None:
        return []
    table = table if table is not None else get_table(sample.family)
    return [classify_parameter(param, sample.values.get(key)) for key, param in table.items()]


# -------------------------------------------------------------
# ALERT VIEW (graded)
# -------------------------------------------------------------
def deficiency_alerts(
    readings: Sequence[Dict[str, Any]],
    table: Optional[Dict[str, ParameterDefinition]] = None,
) -> List[ClassificationResult]:
    """
    ``readings`` are decoded analytics rows, newest first. The newest row per
    metric is classified; metrics whose newest row has no value are omitted.
    """
    table = table if table is not None else SOIL_PARAMETERS
    newest: Dict[str, Optional[float]] = {}
    for r in readings:
        newest.setdefault(r["metric"], r["value"])

    alerts = []
    for key, param in table.items():
        value = newest.get(key)
        if value is None:
            continue
        alerts.append(classify_parameter(param, value))
    return alerts


def action_list(alerts: Sequence[ClassificationResult], limit: int = settings.ACTION_LIST_LIMIT) -> List[str]:
    actions: List[str] = []
    for status in (BandStatus.red, BandStatus.amber):
        for a in alerts:
            if a.status != status.value or not a.advisory:
                continue
            if a.advisory in actions:
                continue
            actions.append(a.advisory)
    return actions[:limit]


# -------------------------------------------------------------
# COMPOSITES (store-backed)
# -------------------------------------------------------------
async def latest_sample_for_field(store, field_id: str, family) -> Optional[Sample]:
    manual = await latest_manual_sample(store, field_id, family)
    if Family(family) is Family.water:
        return manual
    analytics = analytics_sample(await analytics_history(store, field_id), field_id)
    return select_latest_sample(manual, analytics)


async def field_advisory(store, field_id: str, family="soil") -> FieldAdvisory:
    family = Family(family)
    sample = await latest_sample_for_field(store, field_id, family)

    alerts: List[ClassificationResult] = []
    if family is Family.soil:
        alerts = deficiency_alerts(await analytics_history(store, field_id))

    return FieldAdvisory(
        field_id=field_id,
        family=family.value,
        has_test=sample is not None,
        source=sample.source if sample else None,
        recorded_date=sample.recorded_date if sample else None,
        summary=summarize_sample(sample),
        classifications=classify_sample(sample),
        deficiency_alerts=alerts,
        actions=action_list(alerts),
    )


async def top_summary(store, user_id: str, family="soil") -> TopSummary:
    """Summary of the newest manual test across all of the grower's fields."""
    family = Family(family)
    latest: Optional[Sample] = None
    latest_field: Optional[Dict[str, Any]] = None

    for field in await store.list_fields(user_id):
        sample = await latest_manual_sample(store, field["id"], family)
        if sample is None:
            continue
        # strictly newer: the first field wins a tie
        if latest is None or sample.recorded_date > latest.recorded_date:
            latest, latest_field = sample, field

    if latest is None:
        return TopSummary(family=family.value)

    return TopSummary(
        family=family.value,
        field_id=latest_field["id"],
        field_name=latest_field.get("name", ""),
        recorded_date=latest.recorded_date,
        summary=summarize_sample(latest),
    )


def _status_detail(sample: Optional[Sample], label: str) -> Dict[str, str]:
    if sample is None:
        return {"status": BandStatus.gray.value, "detail": f"No recent {label} test"}

    results = classify_sample(sample)
    status = worst_status(r.status for r in results)
    if status is BandStatus.gray:
        return {"status": status.value, "detail": f"No {label} values recorded"}

    flagged = [r.label for r in results if r.status == status.value]
    if status is BandStatus.green:
        detail = f"All {label} parameters optimal"
    else:
        detail = f"Out of range: {', '.join(flagged)}"
    return {"status": status.value, "detail": detail}


async def health_matrix(store, field_id: str) -> HealthMatrix:
    soil = _status_detail(await latest_sample_for_field(store, field_id, Family.soil), "soil")
    water = _status_detail(await latest_sample_for_field(store, field_id, Family.water), "water")
    return HealthMatrix(
        field_id=field_id,
        soil=soil["status"],
        soil_detail=soil["detail"],
        water=water["status"],
        water_detail=water["detail"],
        # no pest data source yet
        pest=BandStatus.gray.value,
        pest_detail="No pest data",
    )
