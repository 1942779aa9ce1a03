# backend/app/api/farmer/consultation.py

from fastapi import APIRouter, Depends, HTTPException, Query

from app.schemas.farmer.consultation import (
    AcceptPayload,
    ConsultationCreate,
    RxPayload,
    SessionState,
)
from app.api.farmer.fields import require_field
from app.services.farmer.consultation_lifecycle import InvalidTransition
from app.services.farmer.consultation_service import (
    ConsultationNotFound,
    ConsultationSession,
    MutationInProgress,
    get_session,
)
from app.services.farmer.store_factory import get_consultation_store

router = APIRouter()


async def current_session(
    field_id: str,
    user_id: str = Query(...),
    grower_name: str = Query(""),
    grower_phone: str = Query(""),
    field=Depends(require_field),
    store=Depends(get_consultation_store),
) -> ConsultationSession:
    session = get_session(store, field_id, user_id, grower_name, grower_phone)
    # validate against the stored list, not whatever an earlier request left
    if not session.mutating:
        await session.reload()
    return session


async def _run(session: ConsultationSession, action) -> SessionState:
    """
    Store failures come back in ``state.error``; rule breaks and overlapping
    mutations are answered with 409, unknown ids with 404.
    """
    try:
        await action
    except MutationInProgress as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ConsultationNotFound:
        raise HTTPException(status_code=404, detail="consultation_not_found")
    return session.state()


@router.get("/fields/{field_id}/consultations", response_model=SessionState)
async def api_list_consultations(session: ConsultationSession = Depends(current_session)):
    return session.state()


@router.post("/fields/{field_id}/consultations", response_model=SessionState, status_code=201)
async def api_request_consultation(
    payload: ConsultationCreate,
    session: ConsultationSession = Depends(current_session),
):
    return await _run(session, session.request_consultation(payload))


@router.post("/fields/{field_id}/consultations/{consultation_id}/accept", response_model=SessionState)
async def api_accept(
    consultation_id: str,
    payload: AcceptPayload,
    session: ConsultationSession = Depends(current_session),
):
    return await _run(session, session.accept_request(consultation_id, payload.doctor_id))


@router.post("/fields/{field_id}/consultations/{consultation_id}/complete", response_model=SessionState)
async def api_complete(consultation_id: str, session: ConsultationSession = Depends(current_session)):
    return await _run(session, session.complete(consultation_id))


@router.post("/fields/{field_id}/consultations/{consultation_id}/prescription", response_model=SessionState)
async def api_issue_rx(
    consultation_id: str,
    payload: RxPayload,
    session: ConsultationSession = Depends(current_session),
):
    return await _run(session, session.issue_rx(consultation_id, payload))


@router.post("/fields/{field_id}/prescriptions/{rx_id}/apply", response_model=SessionState)
async def api_execute_rx(rx_id: str, session: ConsultationSession = Depends(current_session)):
    return await _run(session, session.execute_rx(rx_id))


@router.post("/fields/{field_id}/prescriptions/{rx_id}/flag-correction", response_model=SessionState)
async def api_flag_correction(rx_id: str, session: ConsultationSession = Depends(current_session)):
    return await _run(session, session.flag_correction(rx_id))
