# backend/app/api/farmer/fields.py

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from app.core.errors import StoreError
from app.schemas.farmer.measurement import AnalyticsCreate, FieldCreate, FieldOut
from app.services.farmer.store_factory import get_measurement_store

router = APIRouter()


async def require_field(field_id: str, store=Depends(get_measurement_store)):
    try:
        field = await store.get_field(field_id)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    if field is None:
        raise HTTPException(status_code=404, detail="field_not_found")
    return field


@router.post("/fields", response_model=FieldOut, status_code=201)
async def create_field(payload: FieldCreate, store=Depends(get_measurement_store)):
    try:
        return await store.create_field(payload.user_id, payload.name)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/fields", response_model=List[FieldOut])
async def list_fields(user_id: str = Query(...), store=Depends(get_measurement_store)):
    try:
        return await store.list_fields(user_id)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


@router.get("/fields/{field_id}", response_model=FieldOut)
async def get_field(field=Depends(require_field)):
    return field


@router.post("/fields/{field_id}/analytics", status_code=201)
async def add_analytic(
    field_id: str,
    payload: AnalyticsCreate,
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    """Sensor / lab-feed reading for one metric (N, P, K, soil_ph ...)."""
    try:
        return await store.insert_analytic(
            field_id, payload.metric_type, payload.metric_value, payload.recorded_date
        )
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
