# backend/app/api/farmer/soil.py

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.errors import StoreError
from app.api.farmer.fields import require_field
from app.schemas.farmer.advisory import FieldAdvisory, TopSummary
from app.schemas.farmer.measurement import Sample, SoilTestCreate, WaterTestCreate
from app.services.farmer.measurement_service import (
    EmptySubmissionError,
    nutrient_history,
    record_soil_test,
    record_water_test,
)
from app.services.farmer.soil_advisory_service import field_advisory, top_summary
from app.services.farmer.store_factory import get_measurement_store

router = APIRouter()

FAMILY_PATTERN = "^(soil|water)$"


# ===========================
# LAB SUBMISSIONS
# ===========================

@router.post("/fields/{field_id}/soil-tests", response_model=Sample, status_code=201)
async def api_record_soil(
    field_id: str,
    payload: SoilTestCreate,
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    try:
        return await record_soil_test(store, field_id, payload)
    except EmptySubmissionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.post("/fields/{field_id}/water-tests", response_model=Sample, status_code=201)
async def api_record_water(
    field_id: str,
    payload: WaterTestCreate,
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    try:
        return await record_water_test(store, field_id, payload)
    except EmptySubmissionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


# ===========================
# ADVISORY VIEWS
# ===========================

@router.get("/fields/{field_id}/advisory", response_model=FieldAdvisory)
async def api_field_advisory(
    field_id: str,
    family: str = Query("soil", pattern=FAMILY_PATTERN),
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    """
    Latest-sample summary (lacking / excess), per-parameter RAG status and,
    for soil, the analytics deficiency alerts with their top actions.
    """
    try:
        return await field_advisory(store, field_id, family)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/fields/{field_id}/soil-history")
async def api_soil_history(
    field_id: str,
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    try:
        return await nutrient_history(store, field_id)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/summary/{user_id}", response_model=TopSummary)
async def api_top_summary(
    user_id: str,
    family: str = Query("soil", pattern=FAMILY_PATTERN),
    store=Depends(get_measurement_store),
):
    try:
        return await top_summary(store, user_id, family)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
