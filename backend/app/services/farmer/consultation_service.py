# backend/app/services/farmer/consultation_service.py

"""
Tele-agronomy consultation session (one field, one user)

Holds the consultation list for a field+user and runs every mutation through
the same protocol:

    reject if another mutation is in flight
    mutating = True, error = None
    validate against the transition table (no write on rejection)
    write to the store
    re-fetch the full list (after any write attempt)
    mutating = False

Store failures are captured as ``error`` text, never raised; overlapping
mutations and invalid transitions raise so the caller can answer 409.
A session registry keeps one session per (field_id, user_id).
"""

from collections import OrderedDict
from threading import Lock
from typing import Awaitable, Callable, List, Optional, Tuple

from app.core.errors import StoreError
from app.core.logger import get_logger
from app.schemas.farmer.consultation import (
    ConsultationCreate,
    ConsultationInsert,
    ConsultationRequest,
    DigitalPrescription,
    PrescriptionCreate,
    PrescriptionStatus,
    RxPayload,
    SessionState,
)
from app.services.farmer.consultation_lifecycle import (
    InvalidTransition,
    check_accept,
    check_complete,
    check_issue,
    find_prescription_owner,
    next_prescription_status,
)

logger = get_logger("consultations")


class MutationInProgress(Exception):
    """A second mutation was issued while one is outstanding."""


class ConsultationNotFound(LookupError):
    pass


class ConsultationSession:

    def __init__(self, store, field_id: str, user_id: str, grower_name: str = "", grower_phone: str = ""):
        self.store = store
        self.field_id = field_id
        self.user_id = user_id
        self.grower_name = grower_name
        self.grower_phone = grower_phone

        self.consultations: List[ConsultationRequest] = []
        self.loading = False
        self.mutating = False
        self.error: Optional[str] = None

    # -------------------------
    # Derived
    # -------------------------
    @property
    def all_prescriptions(self) -> List[DigitalPrescription]:
        return [c.prescription for c in self.consultations if c.prescription is not None]

    @property
    def pending_rx_count(self) -> int:
        return sum(1 for rx in self.all_prescriptions if rx.status is PrescriptionStatus.PENDING)

    def state(self) -> SessionState:
        return SessionState(
            field_id=self.field_id,
            user_id=self.user_id,
            consultations=self.consultations,
            pending_rx_count=self.pending_rx_count,
            loading=self.loading,
            mutating=self.mutating,
            error=self.error,
        )

    def _log_extra(self, **fields):
        extra = {"field_id": self.field_id, "user_id": self.user_id}
        extra.update(fields)
        return extra

    # -------------------------
    # Load
    # -------------------------
    async def reload(self, clear_error: bool = True) -> None:
        # nothing to fetch before the session is bound to a field and user
        if not self.field_id or not self.user_id:
            self.loading = False
            return

        self.loading = True
        if clear_error:
            self.error = None
        try:
            self.consultations = await self.store.fetch_consultations(self.field_id, self.user_id)
        except StoreError as exc:
            logger.warning("Consultation fetch failed: %s", exc, extra=self._log_extra())
            if clear_error or self.error is None:
                self.error = str(exc)
        finally:
            self.loading = False

    def _get(self, consultation_id: str) -> ConsultationRequest:
        for c in self.consultations:
            if c.id == consultation_id:
                return c
        raise ConsultationNotFound(consultation_id)

    # -------------------------
    # Mutation protocol
    # -------------------------
    async def _mutate(self, name: str, validate: Callable[[], None], write: Callable[[], Awaitable[None]]) -> bool:
        if self.mutating:
            raise MutationInProgress(f"{name} rejected: another change is still being saved")

        self.mutating = True
        self.error = None
        try:
            validate()
            try:
                await write()
            except StoreError as exc:
                self.error = str(exc)
                logger.warning("%s failed: %s", name, exc, extra=self._log_extra())
            else:
                logger.info("%s succeeded", name, extra=self._log_extra())
            # keep the write error visible if the re-fetch also fails
            await self.reload(clear_error=self.error is None)
            return self.error is None
        finally:
            self.mutating = False

    # -------------------------
    # Actions
    # -------------------------
    async def request_consultation(self, payload: ConsultationCreate) -> bool:
        insert = ConsultationInsert(
            **payload.model_dump(),
            user_id=self.user_id,
            grower_name=self.grower_name,
            grower_phone=self.grower_phone,
            field_id=self.field_id,
        )

        def validate():
            if not self.field_id or not self.user_id:
                raise InvalidTransition("A field and user are required to request a consultation")

        return await self._mutate(
            "request_consultation", validate, lambda: self.store.create_consultation(insert)
        )

    async def accept_request(self, consultation_id: str, doctor_id: str) -> bool:
        target = {}

        def validate():
            target["status"] = check_accept(self._get(consultation_id), doctor_id)

        return await self._mutate(
            "accept_request",
            validate,
            lambda: self.store.update_consultation_status(consultation_id, target["status"].value, doctor_id),
        )

    async def complete(self, consultation_id: str) -> bool:
        target = {}

        def validate():
            target["status"] = check_complete(self._get(consultation_id))

        return await self._mutate(
            "complete",
            validate,
            lambda: self.store.update_consultation_status(consultation_id, target["status"].value),
        )

    async def issue_rx(self, consultation_id: str, payload: RxPayload) -> bool:
        create = PrescriptionCreate(consultation_id=consultation_id, **payload.model_dump())

        def validate():
            check_issue(self._get(consultation_id), payload.doctor_id)

        return await self._mutate("issue_rx", validate, lambda: self.store.issue_prescription(create))

    async def _move_rx(self, name: str, rx_id: str, action: str) -> bool:
        target = {}

        def validate():
            owner = find_prescription_owner(self.consultations, rx_id)
            if owner is None:
                raise ConsultationNotFound(rx_id)
            target["status"] = next_prescription_status(owner.prescription.status, action)

        return await self._mutate(
            name,
            validate,
            lambda: self.store.update_prescription_status(rx_id, target["status"].value),
        )

    async def execute_rx(self, rx_id: str) -> bool:
        return await self._move_rx("execute_rx", rx_id, "apply")

    async def flag_correction(self, rx_id: str) -> bool:
        return await self._move_rx("flag_correction", rx_id, "flag_correction")


# -------------------------------------------------------------
# Session registry (one per field + user)
# -------------------------------------------------------------
# Least recently used idle sessions are evicted past this size and rebuilt
# from the store on their next request.
MAX_SESSIONS = 1024

_sessions: "OrderedDict[Tuple[str, str], ConsultationSession]" = OrderedDict()
_sessions_lock = Lock()


def _evict_idle(keep: Tuple[str, str]) -> None:
    for key in list(_sessions):
        if len(_sessions) <= MAX_SESSIONS:
            return
        if key != keep and not _sessions[key].mutating:
            del _sessions[key]


def get_session(store, field_id: str, user_id: str, grower_name: str = "", grower_phone: str = "") -> ConsultationSession:
    key = (field_id, user_id)
    with _sessions_lock:
        session = _sessions.get(key)
        if session is None or session.store is not store:
            session = ConsultationSession(store, field_id, user_id, grower_name, grower_phone)
            _sessions[key] = session
        _sessions.move_to_end(key)
        _evict_idle(key)
        if grower_name:
            session.grower_name = grower_name
        if grower_phone:
            session.grower_phone = grower_phone
        return session


def _clear_sessions():
    """For testing only."""
    with _sessions_lock:
        _sessions.clear()
