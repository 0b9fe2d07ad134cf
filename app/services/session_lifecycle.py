# app/services/session_lifecycle.py
# Tutoring session booking and the status state machine
#
#   pending ──confirm(tutor)──► confirmed ──complete(tutor)──► completed
#      │                           │
#      └──────cancel(either)───────┴──► cancelled
#
# completed and cancelled are terminal. Every status write is a compare-and-set
# on (id, expected status): when two callers race, exactly one wins and the
# other gets InvalidState.
#
# This module raises domain errors only. Notifications are dispatched by the
# API layer after the endpoint's transaction succeeds.

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, InvalidState, NotFound, ValidationError
from app.models.tutor import TutorProfile
from app.models.tutoring_session import PAYMENT_STATUSES, TutoringSession
from app.models.user import User

logger = logging.getLogger("studybuddy.sessions")

# target status → (allowed source statuses, roles allowed to request it)
TRANSITIONS = {
    "confirmed": ({"pending"}, {"tutor"}),
    "completed": ({"confirmed"}, {"tutor"}),
    "cancelled": ({"pending", "confirmed"}, {"student", "tutor"}),
}


def _participant_role(session: TutoringSession, user_id: int) -> Optional[str]:
    if user_id == session.tutor_id:
        return "tutor"
    if user_id == session.student_id:
        return "student"
    return None


# ── Booking ───────────────────────────────────────────────────────────────────

def _calendar_day(value: datetime) -> datetime:
    """Midnight UTC of the value's calendar day. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def create_session(
    db: Session,
    caller: User,
    student_id: int,
    tutor_id: int,
    subject: str,
    date: datetime,
    start_time: str,
    duration: int,
    description: Optional[str] = None,
    session_type: str = "online",
) -> TutoringSession:
    """
    Book a session. Status always starts at pending and payment at unpaid.

    total_amount is priced from the tutor's current hourly rate:
        hourly_rate × duration / 60

    date is stored as its calendar day; start_time carries the time of day.

    Raises:
        ValidationError: bad duration, unknown student/tutor, tutor without profile
        Forbidden: caller books on behalf of someone else
    """
    if duration is None or duration <= 0:
        raise ValidationError("Duration must be a positive number of minutes.")

    if caller.role == "student" and caller.id != student_id:
        raise Forbidden("Students can only book sessions for themselves.")
    if caller.role == "tutor" and caller.id != tutor_id:
        raise Forbidden("Tutors can only create sessions for themselves.")

    student = db.query(User).filter(User.id == student_id).first()
    if not student or student.role != "student":
        raise ValidationError(f"User {student_id} is not a student.")

    tutor = db.query(User).filter(User.id == tutor_id).first()
    if not tutor or tutor.role != "tutor":
        raise ValidationError(f"User {tutor_id} is not a tutor.")

    profile = db.query(TutorProfile).filter(TutorProfile.user_id == tutor_id).first()
    if not profile:
        raise ValidationError("This tutor has not set up a tutor profile yet.")

    now = datetime.now(timezone.utc)
    session = TutoringSession(
        student_id=student_id,
        tutor_id=tutor_id,
        created_by=caller.id,
        subject=subject,
        session_type=session_type,
        date=_calendar_day(date),
        start_time=start_time,
        duration=duration,
        total_amount=round(profile.hourly_rate * duration / 60, 2),
        description=description,
        status="pending",
        payment_status="unpaid",
        created_at=now,
        updated_at=now,
    )
    db.add(session)
    db.flush()

    logger.info(
        f"Session {session.id} booked: student={student_id} tutor={tutor_id} "
        f"duration={duration} amount={session.total_amount}"
    )
    return session


# ── Status Transitions ────────────────────────────────────────────────────────

def set_status(db: Session, session_id: int, new_status: str, caller_id: int) -> TutoringSession:
    """
    Move a session to new_status on behalf of caller_id.

    Checks, in order: the session exists (NotFound), the caller takes part in
    it (Forbidden), the caller's role may request new_status (Forbidden), and
    the transition is legal from the current status (InvalidState).
    Only status and updated_at change.
    """
    session = get_session(db, session_id)

    role = _participant_role(session, caller_id)
    if role is None:
        logger.warning(f"User {caller_id} tried to update session {session_id} they are not part of")
        raise Forbidden("You are not a participant in this session.")

    rule = TRANSITIONS.get(new_status)
    if rule is None:
        raise InvalidState(f"Sessions cannot be moved to '{new_status}'.")

    sources, roles = rule
    if role not in roles:
        logger.warning(f"{role} {caller_id} may not set session {session_id} to {new_status}")
        raise Forbidden(f"Only the tutor can mark a session as {new_status}.")

    current = session.status
    if current not in sources:
        raise InvalidState(f"Cannot change session from '{current}' to '{new_status}'.")

    result = db.execute(
        update(TutoringSession)
        .where(TutoringSession.id == session_id, TutoringSession.status == current)
        .values(status=new_status, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning(f"Session {session_id} changed concurrently; {new_status} rejected")
        raise InvalidState("Session status was changed by someone else. Refresh and try again.")

    db.refresh(session)
    logger.info(f"Session {session_id}: {current} → {new_status} by {role} {caller_id}")
    return session


# ── Payment ───────────────────────────────────────────────────────────────────

def record_payment(db: Session, session_id: int, caller_id: int, payment_status: str) -> TutoringSession:
    """
    Store the payment signal reported by the client. No money moves here.
    Only the session's student may report it; cancelled sessions are closed.
    """
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Unknown payment status '{payment_status}'.")

    session = get_session(db, session_id)
    if caller_id != session.student_id:
        raise Forbidden("Only the student on this session can record a payment.")
    if session.status == "cancelled":
        raise InvalidState("Cannot record payment for a cancelled session.")

    session.payment_status = payment_status
    session.updated_at = datetime.now(timezone.utc)
    db.flush()

    logger.info(f"Session {session_id} payment_status={payment_status}")
    return session


# ── Reads ─────────────────────────────────────────────────────────────────────

def get_session(db: Session, session_id: int) -> TutoringSession:
    session = db.query(TutoringSession).filter(TutoringSession.id == session_id).first()
    if not session:
        raise NotFound("Session not found.")
    return session


def list_sessions_for_user(db: Session, user: User, status: Optional[str] = None) -> List[TutoringSession]:
    """Sessions where the user is the student (or the tutor, for tutors), soonest first."""
    query = db.query(TutoringSession)
    if user.role == "tutor":
        query = query.filter(TutoringSession.tutor_id == user.id)
    elif user.role == "student":
        query = query.filter(TutoringSession.student_id == user.id)
    else:
        query = query.filter(
            or_(TutoringSession.student_id == user.id, TutoringSession.tutor_id == user.id)
        )
    if status:
        query = query.filter(TutoringSession.status == status)
    return query.order_by(TutoringSession.date, TutoringSession.id).all()


def list_pending_for_tutor(db: Session, tutor_id: int) -> List[TutoringSession]:
    return (
        db.query(TutoringSession)
        .filter(TutoringSession.tutor_id == tutor_id, TutoringSession.status == "pending")
        .order_by(TutoringSession.created_at, TutoringSession.id)
        .all()
    )
