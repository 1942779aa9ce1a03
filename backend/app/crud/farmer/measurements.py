# backend/app/crud/farmer/measurements.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional, List, Dict, Any
import datetime

from app.models.farmer.measurement import Field, SoilTestResult, WaterTestResult, FieldAnalytic


# -------------------------------
# FIELDS
# -------------------------------
async def create_field(db: AsyncSession, user_id: str, name: str) -> Field:
    field = Field(user_id=user_id, name=name, created_at=datetime.datetime.utcnow())
    db.add(field)
    await db.commit()
    return field


async def get_field(db: AsyncSession, field_id: str) -> Optional[Field]:
    return await db.get(Field, field_id)


async def list_fields(db: AsyncSession, user_id: str) -> List[Field]:
    rows = await db.scalars(
        select(Field).where(Field.user_id == user_id).order_by(Field.created_at)
    )
    return rows.all()


# -------------------------------
# SOIL / WATER RESULTS
# -------------------------------
async def insert_soil_result(
    db: AsyncSession, field_id: str, user_id: str, recorded_date: datetime.date, values: Dict[str, Any]
) -> SoilTestResult:
    row = SoilTestResult(field_id=field_id, user_id=user_id, recorded_date=recorded_date, **values)
    db.add(row)
    await db.commit()
    return row


async def insert_water_result(
    db: AsyncSession,
    field_id: str,
    user_id: str,
    test_date: datetime.date,
    values: Dict[str, Any],
    report_url: Optional[str] = None,
) -> WaterTestResult:
    row = WaterTestResult(
        field_id=field_id, user_id=user_id, test_date=test_date, report_url=report_url, **values
    )
    db.add(row)
    await db.commit()
    return row


async def latest_soil_results(db: AsyncSession, field_id: str, limit: Optional[int] = None) -> List[SoilTestResult]:
    stmt = (
        select(SoilTestResult)
        .where(SoilTestResult.field_id == field_id)
        .order_by(SoilTestResult.recorded_date.desc(), SoilTestResult.created_at.desc())
    )
    if limit:
        stmt = stmt.limit(limit)
    rows = await db.scalars(stmt)
    return rows.all()


async def latest_water_results(db: AsyncSession, field_id: str, limit: Optional[int] = None) -> List[WaterTestResult]:
    stmt = (
        select(WaterTestResult)
        .where(WaterTestResult.field_id == field_id)
        .order_by(WaterTestResult.test_date.desc(), WaterTestResult.created_at.desc())
    )
    if limit:
        stmt = stmt.limit(limit)
    rows = await db.scalars(stmt)
    return rows.all()


# -------------------------------
# ANALYTICS
# -------------------------------
async def insert_analytic(
    db: AsyncSession, field_id: str, metric_type: str, metric_value: Optional[float], recorded_date: datetime.date
) -> FieldAnalytic:
    row = FieldAnalytic(
        field_id=field_id, metric_type=metric_type, metric_value=metric_value, recorded_date=recorded_date
    )
    db.add(row)
    await db.commit()
    return row


async def list_analytics(db: AsyncSession, field_id: str, limit: Optional[int] = None) -> List[FieldAnalytic]:
    stmt = (
        select(FieldAnalytic)
        .where(FieldAnalytic.field_id == field_id)
        .order_by(FieldAnalytic.recorded_date.desc())
    )
    if limit:
        stmt = stmt.limit(limit)
    rows = await db.scalars(stmt)
    return rows.all()
