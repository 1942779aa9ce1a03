# backend/app/schemas/farmer/consultation.py

from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
import enum


class ConsultType(str, enum.Enum):
    CHAT = "CHAT"
    CALL = "CALL"
    VIDEO = "VIDEO"
    ONSITE_VISIT = "ONSITE_VISIT"


class ConsultStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class PrescriptionStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    NEEDS_CORRECTION = "NEEDS_CORRECTION"


class ActionCategory(str, enum.Enum):
    FUNGICIDE = "FUNGICIDE"
    INSECTICIDE = "INSECTICIDE"
    FERTILIZER = "FERTILIZER"
    LABOR = "LABOR"
    IRRIGATION = "IRRIGATION"
    OTHER = "OTHER"


# ============================================================
# HYDRATED ENTITIES (what the store hands back)
# ============================================================

class ActionItem(BaseModel):
    id: str
    category: ActionCategory
    product_name: str
    dosage: str
    estimated_cost: float = 0.0
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class DigitalPrescription(BaseModel):
    id: str
    consultation_id: str
    doctor_name: str
    hospital_name: str = ""
    issue_diagnosed: str
    eppo_code: str = ""
    recommendation: str = ""
    action_items: List[ActionItem] = []
    status: PrescriptionStatus = PrescriptionStatus.PENDING
    issued_at: datetime
    follow_up_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class ConsultationRequest(BaseModel):
    id: str
    user_id: str
    grower_name: str
    grower_phone: str = ""
    field_id: str
    orchard_name: str = ""
    doctor_id: Optional[str] = None
    type: ConsultType
    status: ConsultStatus = ConsultStatus.REQUESTED
    target_datetime: Optional[datetime] = None
    notes: str = ""
    prescription: Optional[DigitalPrescription] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# WRITE PAYLOADS
# ============================================================

class ConsultationCreate(BaseModel):
    """What a grower submits; identity fields are filled by the session."""
    type: ConsultType
    target_datetime: Optional[datetime] = None
    notes: str = ""
    orchard_name: str = ""
    doctor_id: Optional[str] = None     # preferred doctor, bound only on accept


class ConsultationInsert(ConsultationCreate):
    user_id: str
    grower_name: str
    grower_phone: str = ""
    field_id: str


class ActionItemCreate(BaseModel):
    category: ActionCategory
    product_name: str
    dosage: str
    estimated_cost: float = Field(0.0, ge=0)


class PrescriptionCreate(BaseModel):
    consultation_id: str
    doctor_id: str
    doctor_name: str
    hospital_name: str = ""
    issue_diagnosed: str
    eppo_code: str = ""
    recommendation: str = ""
    follow_up_date: Optional[date] = None
    action_items: List[ActionItemCreate] = []


class AcceptPayload(BaseModel):
    doctor_id: str


class RxPayload(BaseModel):
    doctor_id: str
    doctor_name: str
    hospital_name: str = ""
    issue_diagnosed: str
    eppo_code: str = ""
    recommendation: str = ""
    follow_up_date: Optional[date] = None
    action_items: List[ActionItemCreate] = []


class SessionState(BaseModel):
    field_id: str
    user_id: str
    consultations: List[ConsultationRequest] = []
    pending_rx_count: int = 0
    loading: bool = False
    mutating: bool = False
    error: Optional[str] = None
