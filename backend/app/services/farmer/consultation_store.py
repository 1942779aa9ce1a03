# backend/app/services/farmer/consultation_store.py

"""
Consultation store adapters

Contract (every call may raise StoreError with a readable reason):
 - fetch_consultations(field_id, user_id) -> [ConsultationRequest], newest first
 - create_consultation(payload)
 - update_consultation_status(consultation_id, status, doctor_id=None)
 - issue_prescription(payload)
 - update_prescription_status(rx_id, status)

Writes are dumb; the transition rules live in consultation_lifecycle and are
applied by ConsultationSession before it calls the store. Raw rows go
through decode_consultation so a malformed row is dropped, not trusted.
"""

from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Optional
import uuid

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import StoreError, row_to_dict
from app.core.logger import get_logger
from app.crud.farmer import consultations as crud
from app.schemas.farmer.consultation import (
    ConsultationInsert,
    ConsultationRequest,
    ConsultStatus,
    PrescriptionCreate,
)

logger = get_logger("consultation_store")


def _uid() -> str:
    return str(uuid.uuid4())


# -------------------------------------------------------------
# DECODE
# -------------------------------------------------------------
def lifecycle_violation(c: ConsultationRequest) -> Optional[str]:
    """A doctor only once accepted, a prescription never before acceptance."""
    if c.status is ConsultStatus.REQUESTED:
        if c.doctor_id:
            return "doctor bound before acceptance"
        if c.prescription is not None:
            return "prescription on a consultation not yet accepted"
    elif not c.doctor_id:
        return f"{c.status.value} consultation without a doctor"
    return None


def decode_consultation(
    row: Dict[str, Any],
    rx_row: Optional[Dict[str, Any]] = None,
    item_rows: Optional[List[Dict[str, Any]]] = None,
) -> Optional[ConsultationRequest]:
    data = dict(row)
    if rx_row is not None:
        rx = dict(rx_row)
        rx["action_items"] = sorted(item_rows or [], key=lambda i: i.get("sort_order", 0))
        data["prescription"] = rx
    else:
        data["prescription"] = None

    try:
        decoded = ConsultationRequest.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Dropping malformed consultation row: %s", exc.errors()[0].get("msg", ""),
            extra={"consultation_id": row.get("id")},
        )
        return None

    problem = lifecycle_violation(decoded)
    if problem:
        logger.warning("Dropping malformed consultation row: %s", problem, extra={"consultation_id": row.get("id")})
        return None
    return decoded


# -------------------------------------------------------------
# IN-MEMORY
# -------------------------------------------------------------
class InMemoryConsultationStore:

    def __init__(self):
        self._lock = Lock()
        self._consultations: Dict[str, Dict[str, Any]] = {}
        self._prescriptions: Dict[str, Dict[str, Any]] = {}
        self._items: Dict[str, List[Dict[str, Any]]] = {}

    async def fetch_consultations(self, field_id: str, user_id: str) -> List[ConsultationRequest]:
        with self._lock:
            rows = [
                dict(c) for c in self._consultations.values()
                if c["field_id"] == field_id and c["user_id"] == user_id
            ]
            by_consultation = {rx["consultation_id"]: dict(rx) for rx in self._prescriptions.values()}
            items = {rx_id: [dict(i) for i in lst] for rx_id, lst in self._items.items()}

        rows.sort(key=lambda r: r["created_at"], reverse=True)
        out = []
        for row in rows:
            rx = by_consultation.get(row["id"])
            decoded = decode_consultation(row, rx, items.get(rx["id"]) if rx else None)
            if decoded is not None:
                out.append(decoded)
        return out

    async def create_consultation(self, payload: ConsultationInsert) -> str:
        cid = _uid()
        row = {
            "id": cid,
            "user_id": payload.user_id,
            "grower_name": payload.grower_name,
            "grower_phone": payload.grower_phone,
            "field_id": payload.field_id,
            "orchard_name": payload.orchard_name,
            "doctor_id": None,
            "type": payload.type.value,
            "status": "REQUESTED",
            "target_datetime": payload.target_datetime,
            "notes": payload.notes,
            "created_at": datetime.utcnow(),
        }
        with self._lock:
            self._consultations[cid] = row
        return cid

    async def update_consultation_status(
        self, consultation_id: str, status: str, doctor_id: Optional[str] = None
    ) -> None:
        with self._lock:
            row = self._consultations.get(consultation_id)
            if row is None:
                raise StoreError(f"consultation {consultation_id} not found")
            row["status"] = status
            if doctor_id is not None:
                row["doctor_id"] = doctor_id

    async def issue_prescription(self, payload: PrescriptionCreate) -> str:
        rx_id = _uid()
        rx = {
            "id": rx_id,
            "consultation_id": payload.consultation_id,
            "doctor_name": payload.doctor_name,
            "hospital_name": payload.hospital_name,
            "issue_diagnosed": payload.issue_diagnosed,
            "eppo_code": payload.eppo_code,
            "recommendation": payload.recommendation,
            "status": "PENDING",
            "issued_at": datetime.utcnow(),
            "follow_up_date": payload.follow_up_date,
        }
        items = [
            {
                "id": _uid(),
                "prescription_id": rx_id,
                "category": item.category.value,
                "product_name": item.product_name,
                "dosage": item.dosage,
                "estimated_cost": item.estimated_cost,
                "sort_order": order,
            }
            for order, item in enumerate(payload.action_items)
        ]
        with self._lock:
            if payload.consultation_id not in self._consultations:
                raise StoreError(f"consultation {payload.consultation_id} not found")
            # unique consultation_id, as the table constraint would enforce
            if any(r["consultation_id"] == payload.consultation_id for r in self._prescriptions.values()):
                raise StoreError("duplicate key value violates unique constraint on consultation_id")
            self._prescriptions[rx_id] = rx
            self._items[rx_id] = items
        return rx_id

    async def update_prescription_status(self, rx_id: str, status: str) -> None:
        with self._lock:
            rx = self._prescriptions.get(rx_id)
            if rx is None:
                raise StoreError(f"prescription {rx_id} not found")
            rx["status"] = status


# -------------------------------------------------------------
# SQL (async SQLAlchemy)
# -------------------------------------------------------------
class SqlConsultationStore:

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

    async def fetch_consultations(self, field_id: str, user_id: str) -> List[ConsultationRequest]:
        rows = await self._run(crud.list_consultations, field_id, user_id)
        out = []
        for row in rows:
            rx = row.prescription
            decoded = decode_consultation(
                row_to_dict(row),
                row_to_dict(rx) if rx is not None else None,
                [row_to_dict(i) for i in rx.action_items] if rx is not None else None,
            )
            if decoded is not None:
                out.append(decoded)
        return out

    async def create_consultation(self, payload: ConsultationInsert) -> str:
        row = await self._run(crud.create_consultation, payload)
        return row.id

    async def update_consultation_status(
        self, consultation_id: str, status: str, doctor_id: Optional[str] = None
    ) -> None:
        row = await self._run(crud.update_consultation_status, consultation_id, status, doctor_id)
        if row is None:
            raise StoreError(f"consultation {consultation_id} not found")

    async def issue_prescription(self, payload: PrescriptionCreate) -> str:
        rx = await self._run(crud.create_prescription, payload)
        return rx.id

    async def update_prescription_status(self, rx_id: str, status: str) -> None:
        rx = await self._run(crud.update_prescription_status, rx_id, status)
        if rx is None:
            raise StoreError(f"prescription {rx_id} not found")
