# app/api/v1/endpoints/sessions.py
# Tutoring session endpoints
#
# Booking:
#   POST  /sessions/                 → book a session (always starts pending)
#   GET   /sessions/                 → own sessions, optional ?status=
#   GET   /sessions/pending          → tutor: pending requests to respond to
#   GET   /sessions/{id}             → one session (participants only)
#
# Lifecycle:
#   PATCH /sessions/{id}/status      → confirm | complete (tutor), cancel (either)
#   PATCH /sessions/{id}/payment     → student reports payment status
#
# Business rules live in app/services/session_lifecycle.py; this module only
# resolves the caller, commits, and notifies the other participant.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login, require_tutor
from app.db.session import get_db
from app.models.tutoring_session import SESSION_STATUSES, TutoringSession
from app.models.user import User
from app.schemas.session import (
    SessionCreate,
    SessionPaymentUpdate,
    SessionResponse,
    SessionStatusUpdate,
)
from app.services import session_lifecycle
from app.services.notification_service import (
    notify_session_requested,
    notify_status_change,
    safe_notify,
)

router = APIRouter()


# ── Helpers ───────────────────────────────────────────────────────────────────

def _build_response(session: TutoringSession, db: Session) -> SessionResponse:
    response = SessionResponse.model_validate(session)
    names = dict(
        db.query(User.id, User.full_name)
        .filter(User.id.in_([session.student_id, session.tutor_id]))
        .all()
    )
    response.student_name = names.get(session.student_id)
    response.tutor_name = names.get(session.tutor_id)
    return response


def _get_participant_session(session_id: int, user: User, db: Session) -> TutoringSession:
    session = session_lifecycle.get_session(db, session_id)
    if user.id not in (session.student_id, session.tutor_id):
        raise HTTPException(status_code=403, detail="You are not a participant in this session.")
    return session


# ── Booking ───────────────────────────────────────────────────────────────────

@router.post(
    "/",
    response_model=SessionResponse,
    status_code=201,
    summary="Book a tutoring session",
)
def create_session(
    payload: SessionCreate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    """
    Students book for themselves with any tutor; tutors may create a session
    for themselves with any student. The price comes from the tutor's current
    hourly rate and the session always starts pending.
    """
    session = session_lifecycle.create_session(
        db,
        caller=current_user,
        student_id=payload.student_id,
        tutor_id=payload.tutor_id,
        subject=payload.subject,
        date=payload.date,
        start_time=payload.start_time,
        duration=payload.duration,
        description=payload.description,
        session_type=payload.session_type,
    )
    db.commit()

    student = db.query(User).filter(User.id == session.student_id).first()
    notify_session_requested(db, session, student.full_name)
    db.commit()
    return _build_response(session, db)


@router.get(
    "/",
    response_model=List[SessionResponse],
    summary="List own sessions",
)
def list_sessions(
    status: Optional[str] = Query(None, description="pending | confirmed | completed | cancelled"),
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    if status and status not in SESSION_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status '{status}'.")
    sessions = session_lifecycle.list_sessions_for_user(db, current_user, status)
    return [_build_response(s, db) for s in sessions]


@router.get(
    "/pending",
    response_model=List[SessionResponse],
    summary="Tutor: pending session requests",
)
def list_pending(
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    sessions = session_lifecycle.list_pending_for_tutor(db, current_user.id)
    return [_build_response(s, db) for s in sessions]


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get a session",
)
def get_session(
    session_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    return _build_response(_get_participant_session(session_id, current_user, db), db)


# ── Lifecycle ─────────────────────────────────────────────────────────────────

@router.patch(
    "/{session_id}/status",
    response_model=SessionResponse,
    summary="Confirm, complete or cancel a session",
)
def update_status(
    session_id: int,
    payload: SessionStatusUpdate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    session = session_lifecycle.set_status(db, session_id, payload.status, current_user.id)
    db.commit()

    notify_status_change(db, session, current_user.id)
    db.commit()
    return _build_response(session, db)


@router.patch(
    "/{session_id}/payment",
    response_model=SessionResponse,
    summary="Student reports payment for a session",
)
def update_payment(
    session_id: int,
    payload: SessionPaymentUpdate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    session = session_lifecycle.record_payment(db, session_id, current_user.id, payload.payment_status)
    db.commit()

    if session.payment_status == "paid":
        safe_notify(
            db,
            session.tutor_id,
            "payment_received",
            "Payment received",
            f"{current_user.full_name} marked the {session.subject} session as paid.",
            {"session_id": session.id},
        )
        db.commit()
    return _build_response(session, db)
