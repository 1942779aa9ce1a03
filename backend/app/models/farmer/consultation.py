# backend/app/models/farmer/consultation.py

from sqlalchemy import (
    Column, String, Integer, ForeignKey, DateTime, Date,
    Text, Float
)
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime

from app.core.database import Base

def gen_uuid():
    return str(uuid.uuid4())


# ============================================================
# CONSULTATIONS (grower request, bound to a doctor on accept)
# ============================================================
class Consultation(Base):
    __tablename__ = "consultations"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    grower_name = Column(String, nullable=False)
    grower_phone = Column(String, nullable=False, default="")
    field_id = Column(String(36), ForeignKey("fields.id"), nullable=False, index=True)
    orchard_name = Column(String, nullable=False, default="")
    doctor_id = Column(String(36), nullable=True)
    type = Column(String, nullable=False)                        # CHAT, CALL, VIDEO, ONSITE_VISIT
    status = Column(String, nullable=False, default="REQUESTED") # REQUESTED, IN_PROGRESS, COMPLETED
    target_datetime = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    # one-to-one: at most one prescription per consultation
    prescription = relationship(
        "Prescription",
        back_populates="consultation",
        uselist=False,
        cascade="all, delete-orphan",
    )


# ============================================================
# PRESCRIPTIONS
# ============================================================
class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    consultation_id = Column(
        String(36), ForeignKey("consultations.id"), nullable=False, unique=True
    )
    doctor_name = Column(String, nullable=False)
    hospital_name = Column(String, nullable=False, default="")
    issue_diagnosed = Column(Text, nullable=False)
    eppo_code = Column(String, nullable=False, default="")
    recommendation = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default="PENDING")   # PENDING, APPLIED, NEEDS_CORRECTION
    issued_at = Column(DateTime, default=datetime.utcnow)
    follow_up_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    consultation = relationship("Consultation", back_populates="prescription")
    action_items = relationship(
        "PrescriptionActionItem",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionActionItem.sort_order",
    )


class PrescriptionActionItem(Base):
    __tablename__ = "prescription_action_items"

    id = Column(String(36), primary_key=True, default=gen_uuid)
    prescription_id = Column(String(36), ForeignKey("prescriptions.id"), nullable=False)
    category = Column(String, nullable=False)   # FUNGICIDE, INSECTICIDE, FERTILIZER, LABOR, IRRIGATION, OTHER
    product_name = Column(String, nullable=False)
    dosage = Column(String, nullable=False, default="")
    estimated_cost = Column(Float, nullable=False, default=0.0)
    sort_order = Column(Integer, nullable=False, default=0)

    prescription = relationship("Prescription", back_populates="action_items")
