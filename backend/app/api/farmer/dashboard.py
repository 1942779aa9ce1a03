# backend/app/api/farmer/dashboard.py

from fastapi import APIRouter, Depends, HTTPException

from app.core.errors import StoreError
from app.api.farmer.fields import require_field
from app.schemas.farmer.advisory import HealthMatrix
from app.services.farmer.soil_advisory_service import health_matrix
from app.services.farmer.store_factory import get_measurement_store

router = APIRouter()


@router.get("/dashboard/{field_id}/health", response_model=HealthMatrix)
async def api_health_matrix(
    field_id: str,
    field=Depends(require_field),
    store=Depends(get_measurement_store),
):
    try:
        return await health_matrix(store, field_id)
    except StoreError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
