# backend/app/api/__init__.py

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/health")
def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME, "store": settings.STORE_BACKEND}
