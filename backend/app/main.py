# backend/app/main.py

# FORCE logger module import so handlers attach

import app.core.logger
from app.core.logger import logger

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import engine, Base

from app.core.request_middleware import RequestLoggingMiddleware
from app.core.error_middleware import ExceptionLoggingMiddleware

from app import api
from app.api.farmer import (
    consultation,
    dashboard,
    fields,
    soil,
    weather,
)

# ---------------------------------------------------
# Create FastAPI instance FIRST
# ---------------------------------------------------
app = FastAPI(title="Orchard Advisory API", version="1.0")


# ---------------------------------------------------
# CORS MUST be added immediately after app creation
# ---------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------
# Logging middlewares
# ---------------------------------------------------
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionLoggingMiddleware)


# ---------------------------------------------------
# Include Routers
# ---------------------------------------------------
app.include_router(api.router)
app.include_router(fields.router, prefix="/farmer", tags=["farmer-fields"])
app.include_router(soil.router, prefix="/farmer", tags=["farmer-advisory"])
app.include_router(weather.router, prefix="/farmer", tags=["farmer-weather"])
app.include_router(consultation.router, prefix="/farmer", tags=["farmer-consultations"])
app.include_router(dashboard.router, prefix="/farmer", tags=["farmer-dashboard"])


# ---------------------------------------------------
# Startup: create tables only when the SQL store is active
# ---------------------------------------------------
@app.on_event("startup")
async def startup_event():
    if settings.STORE_BACKEND == "sql":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Server started with JSON logging (store backend: %s)", settings.STORE_BACKEND)
