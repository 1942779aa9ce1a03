# backend/app/crud/farmer/consultations.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import Optional, List
import datetime

from app.models.farmer.consultation import Consultation, Prescription, PrescriptionActionItem
from app.schemas.farmer.consultation import ConsultationInsert, PrescriptionCreate


def _with_prescription():
    return selectinload(Consultation.prescription).selectinload(Prescription.action_items)


async def list_consultations(db: AsyncSession, field_id: str, user_id: str) -> List[Consultation]:
    rows = await db.scalars(
        select(Consultation)
        .options(_with_prescription())
        .where(Consultation.field_id == field_id, Consultation.user_id == user_id)
        .order_by(Consultation.created_at.desc())
    )
    return rows.all()


async def create_consultation(db: AsyncSession, payload: ConsultationInsert) -> Consultation:
    row = Consultation(
        user_id=payload.user_id,
        grower_name=payload.grower_name,
        grower_phone=payload.grower_phone,
        field_id=payload.field_id,
        orchard_name=payload.orchard_name,
        # doctor is bound on accept, never at request time
        doctor_id=None,
        type=payload.type.value,
        status="REQUESTED",
        target_datetime=payload.target_datetime,
        notes=payload.notes,
        created_at=datetime.datetime.utcnow(),
    )
    db.add(row)
    await db.commit()
    return row


async def update_consultation_status(
    db: AsyncSession, consultation_id: str, status: str, doctor_id: Optional[str] = None
) -> Optional[Consultation]:
    row = await db.get(Consultation, consultation_id)
    if not row:
        return None

    row.status = status
    if doctor_id is not None:
        row.doctor_id = doctor_id

    await db.commit()
    return row


async def create_prescription(db: AsyncSession, payload: PrescriptionCreate) -> Prescription:
    rx = Prescription(
        consultation_id=payload.consultation_id,
        doctor_name=payload.doctor_name,
        hospital_name=payload.hospital_name,
        issue_diagnosed=payload.issue_diagnosed,
        eppo_code=payload.eppo_code,
        recommendation=payload.recommendation,
        status="PENDING",
        issued_at=datetime.datetime.utcnow(),
        follow_up_date=payload.follow_up_date,
    )
    db.add(rx)
    await db.flush()  # rx.id populated

    for order, item in enumerate(payload.action_items):
        db.add(PrescriptionActionItem(
            prescription_id=rx.id,
            category=item.category.value,
            product_name=item.product_name,
            dosage=item.dosage,
            estimated_cost=item.estimated_cost,
            sort_order=order,
        ))

    await db.commit()
    return rx


async def update_prescription_status(db: AsyncSession, rx_id: str, status: str) -> Optional[Prescription]:
    rx = await db.get(Prescription, rx_id)
    if not rx:
        return None

    rx.status = status
    await db.commit()
    return rx
