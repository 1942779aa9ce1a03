# backend/app/services/farmer/measurement_store.py

"""
Measurement store adapters

Both adapters hand back raw row dicts (the shape the data store returns);
typing happens later in the decode step of measurement_service.

 - InMemoryMeasurementStore : dict-backed, used for local runs and tests
 - SqlMeasurementStore      : async SQLAlchemy over crud.farmer.measurements
"""

from datetime import date, datetime
from threading import Lock
from typing import Any, Dict, List, Optional
import uuid

from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import StoreError, row_to_dict
from app.crud.farmer import measurements as crud


def _uid() -> str:
    return str(uuid.uuid4())


def _limit(rows: List[Dict[str, Any]], limit: Optional[int]) -> List[Dict[str, Any]]:
    return rows[:limit] if limit else rows


class InMemoryMeasurementStore:

    def __init__(self):
        self._lock = Lock()
        self._fields: Dict[str, Dict[str, Any]] = {}
        self._soil: Dict[str, List[Dict[str, Any]]] = {}
        self._water: Dict[str, List[Dict[str, Any]]] = {}
        self._analytics: Dict[str, List[Dict[str, Any]]] = {}

    # -------------------------
    # Fields
    # -------------------------
    async def create_field(self, user_id: str, name: str) -> Dict[str, Any]:
        rec = {"id": _uid(), "user_id": user_id, "name": name, "created_at": datetime.utcnow()}
        with self._lock:
            self._fields[rec["id"]] = rec
        return dict(rec)

    async def get_field(self, field_id: str) -> Optional[Dict[str, Any]]:
        rec = self._fields.get(field_id)
        return dict(rec) if rec else None

    async def list_fields(self, user_id: str) -> List[Dict[str, Any]]:
        return [dict(f) for f in self._fields.values() if f["user_id"] == user_id]

    # -------------------------
    # Lab results
    # -------------------------
    async def insert_soil_result(
        self, field_id: str, user_id: str, recorded_date: date, values: Dict[str, Any]
    ) -> Dict[str, Any]:
        rec = {
            "id": _uid(),
            "field_id": field_id,
            "user_id": user_id,
            "recorded_date": recorded_date,
            "created_at": datetime.utcnow(),
            **values,
        }
        with self._lock:
            self._soil.setdefault(field_id, []).append(rec)
        return dict(rec)

    async def insert_water_result(
        self,
        field_id: str,
        user_id: str,
        test_date: date,
        values: Dict[str, Any],
        report_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        rec = {
            "id": _uid(),
            "field_id": field_id,
            "user_id": user_id,
            "test_date": test_date,
            "report_url": report_url,
            "created_at": datetime.utcnow(),
            **values,
        }
        with self._lock:
            self._water.setdefault(field_id, []).append(rec)
        return dict(rec)

    async def latest_soil_results(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        rows = sorted(
            self._soil.get(field_id, []),
            key=lambda r: (r["recorded_date"], r["created_at"]),
            reverse=True,
        )
        return [dict(r) for r in _limit(rows, limit)]

    async def latest_water_results(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        rows = sorted(
            self._water.get(field_id, []),
            key=lambda r: (r["test_date"], r["created_at"]),
            reverse=True,
        )
        return [dict(r) for r in _limit(rows, limit)]

    # -------------------------
    # Analytics
    # -------------------------
    async def insert_analytic(
        self, field_id: str, metric_type: str, metric_value: Optional[float], recorded_date: date
    ) -> Dict[str, Any]:
        rec = {
            "id": _uid(),
            "field_id": field_id,
            "metric_type": metric_type,
            "metric_value": metric_value,
            "recorded_date": recorded_date,
        }
        with self._lock:
            self._analytics.setdefault(field_id, []).append(rec)
        return dict(rec)

    async def list_analytics(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        # stable sort keeps insertion order within one date
        rows = sorted(self._analytics.get(field_id, []), key=lambda r: r["recorded_date"], reverse=True)
        return [dict(r) for r in _limit(rows, limit)]


class SqlMeasurementStore:

    def __init__(self, session_factory=None):
        if session_factory is None:
            from app.core.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self._session_factory = session_factory

    async def _run(self, fn, *args, **kwargs):
        try:
            async with self._session_factory() as db:
                return await fn(db, *args, **kwargs)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    async def create_field(self, user_id: str, name: str) -> Dict[str, Any]:
        return row_to_dict(await self._run(crud.create_field, user_id, name))

    async def get_field(self, field_id: str) -> Optional[Dict[str, Any]]:
        row = await self._run(crud.get_field, field_id)
        return row_to_dict(row) if row else None

    async def list_fields(self, user_id: str) -> List[Dict[str, Any]]:
        return [row_to_dict(r) for r in await self._run(crud.list_fields, user_id)]

    async def insert_soil_result(self, field_id, user_id, recorded_date, values) -> Dict[str, Any]:
        return row_to_dict(await self._run(crud.insert_soil_result, field_id, user_id, recorded_date, values))

    async def insert_water_result(self, field_id, user_id, test_date, values, report_url=None) -> Dict[str, Any]:
        row = await self._run(crud.insert_water_result, field_id, user_id, test_date, values, report_url)
        return row_to_dict(row)

    async def latest_soil_results(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return [row_to_dict(r) for r in await self._run(crud.latest_soil_results, field_id, limit)]

    async def latest_water_results(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return [row_to_dict(r) for r in await self._run(crud.latest_water_results, field_id, limit)]

    async def insert_analytic(self, field_id, metric_type, metric_value, recorded_date) -> Dict[str, Any]:
        row = await self._run(crud.insert_analytic, field_id, metric_type, metric_value, recorded_date)
        return row_to_dict(row)

    async def list_analytics(self, field_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return [row_to_dict(r) for r in await self._run(crud.list_analytics, field_id, limit)]
