# backend/app/services/farmer/consultation_lifecycle.py

"""
Consultation / Prescription transition tables

Consultation:
    REQUESTED --accept(doctor_id)--> IN_PROGRESS --complete()--> COMPLETED

Prescription (independent of the consultation once issued):
    (none)           --issue-->           PENDING
    PENDING          --apply-->           APPLIED
    PENDING          --flag_correction--> NEEDS_CORRECTION
    NEEDS_CORRECTION --apply-->           APPLIED
APPLIED is terminal. Anything not listed is rejected before a write.
"""

from typing import Dict, Optional, Tuple

from app.schemas.farmer.consultation import (
    ConsultationRequest,
    ConsultStatus,
    PrescriptionStatus,
)


class InvalidTransition(Exception):
    """A status change that is not in the transition table."""


CONSULTATION_TRANSITIONS: Dict[Tuple[ConsultStatus, str], ConsultStatus] = {
    (ConsultStatus.REQUESTED, "accept"): ConsultStatus.IN_PROGRESS,
    (ConsultStatus.IN_PROGRESS, "complete"): ConsultStatus.COMPLETED,
}

PRESCRIPTION_TRANSITIONS: Dict[Tuple[Optional[PrescriptionStatus], str], PrescriptionStatus] = {
    (None, "issue"): PrescriptionStatus.PENDING,
    (PrescriptionStatus.PENDING, "apply"): PrescriptionStatus.APPLIED,
    (PrescriptionStatus.PENDING, "flag_correction"): PrescriptionStatus.NEEDS_CORRECTION,
    (PrescriptionStatus.NEEDS_CORRECTION, "apply"): PrescriptionStatus.APPLIED,
}


def next_consultation_status(current: ConsultStatus, action: str) -> ConsultStatus:
    target = CONSULTATION_TRANSITIONS.get((ConsultStatus(current), action))
    if target is None:
        raise InvalidTransition(f"Cannot {action} a consultation that is {ConsultStatus(current).value}")
    return target


def next_prescription_status(current: Optional[PrescriptionStatus], action: str) -> PrescriptionStatus:
    current = PrescriptionStatus(current) if current is not None else None
    target = PRESCRIPTION_TRANSITIONS.get((current, action))
    if target is None:
        label = current.value if current else "not issued"
        raise InvalidTransition(f"Cannot {action} a prescription that is {label}")
    return target


# -------------------------------------------------------------
# Preconditions beyond the raw tables
# -------------------------------------------------------------
def check_accept(consultation: ConsultationRequest, doctor_id: str) -> ConsultStatus:
    if not doctor_id:
        raise InvalidTransition("A doctor id is required to accept a consultation")
    return next_consultation_status(consultation.status, "accept")


def check_complete(consultation: ConsultationRequest) -> ConsultStatus:
    return next_consultation_status(consultation.status, "complete")


def check_issue(consultation: ConsultationRequest, doctor_id: str) -> PrescriptionStatus:
    """Only the bound doctor, only while IN_PROGRESS, only once."""
    if consultation.status is not ConsultStatus.IN_PROGRESS:
        raise InvalidTransition(
            f"Prescriptions can only be issued for IN_PROGRESS consultations, not {consultation.status.value}"
        )
    if consultation.doctor_id != doctor_id:
        raise InvalidTransition("Only the assigned doctor can issue a prescription")
    if consultation.prescription is not None:
        raise InvalidTransition("A prescription has already been issued for this consultation")
    return next_prescription_status(None, "issue")


def find_prescription_owner(consultations, rx_id: str) -> Optional[ConsultationRequest]:
    for c in consultations:
        if c.prescription is not None and c.prescription.id == rx_id:
            return c
    return None
