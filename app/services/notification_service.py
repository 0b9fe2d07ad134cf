# app/services/notification_service.py
# Creates in-app notifications for booking, messaging and review events
#
# Usage (from any endpoint or background job):
#   from app.services.notification_service import notify
#   notify(db, user_id=tutor_id, notification_type="session_requested",
#          title="New session request", body="Ali wants a Calculus session")
#
# Notifications are a side effect. safe_notify() logs failures instead of
# raising them, so a broken notification never fails the booking or review
# that triggered it.

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.notification import NOTIFICATION_TYPES, Notification
from app.models.tutoring_session import TutoringSession

logger = logging.getLogger("studybuddy.notifications")


def notify(
    db: Session,
    user_id: int,
    notification_type: str,
    title: str,
    body: Optional[str] = None,
    extra_data: Optional[Dict[str, Any]] = None,
) -> Notification:
    """
    Create an in-app notification.

    Args:
        db: Database session
        user_id: Recipient user ID
        notification_type: One of NOTIFICATION_TYPES
        title: Short notification title
        body: Full notification body
        extra_data: Optional dict stored as JSON (e.g. session_id, conversation_id)

    Returns:
        Created Notification instance
    """
    if notification_type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {notification_type}")

    notification = Notification(
        user_id=user_id,
        notification_type=notification_type,
        title=title,
        body=body,
        extra_data=extra_data or {},
        is_read=False,
    )
    db.add(notification)
    db.flush()
    return notification


def safe_notify(db: Session, user_id: int, notification_type: str, title: str,
                body: Optional[str] = None, extra_data: Optional[Dict[str, Any]] = None) -> Optional[Notification]:
    """
    notify(), but failures are logged and never raised.
    Commit the triggering operation before calling this: a failed flush rolls
    back whatever is still pending on the session.
    """
    try:
        return notify(db, user_id, notification_type, title, body, extra_data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Notification {notification_type} for user {user_id} failed")
    except ValueError:
        logger.exception(f"Notification {notification_type} for user {user_id} failed")
    return None


# ── Session Events ────────────────────────────────────────────────────────────

_STATUS_MESSAGES = {
    "confirmed": ("session_confirmed", "Session confirmed",
                  "Your {subject} session on {date} at {time} has been confirmed."),
    "completed": ("session_completed", "Session completed",
                  "Your {subject} session is complete. You can now leave a review."),
    "cancelled": ("session_cancelled", "Session cancelled",
                  "The {subject} session on {date} at {time} was cancelled."),
}


def notify_session_requested(db: Session, session: TutoringSession, student_name: str) -> None:
    safe_notify(
        db,
        session.tutor_id,
        "session_requested",
        "New session request",
        f"{student_name} requested a {session.subject} session on "
        f"{session.date:%Y-%m-%d} at {session.start_time}.",
        {"session_id": session.id},
    )


def notify_status_change(db: Session, session: TutoringSession, actor_id: int) -> None:
    """Tell the other participant about a status change made by actor_id."""
    entry = _STATUS_MESSAGES.get(session.status)
    if not entry:
        return
    notification_type, title, template = entry
    recipient = session.student_id if actor_id == session.tutor_id else session.tutor_id
    body = template.format(
        subject=session.subject,
        date=f"{session.date:%Y-%m-%d}",
        time=session.start_time,
    )
    safe_notify(db, recipient, notification_type, title, body, {"session_id": session.id})


def notify_session_reminder(db: Session, session: TutoringSession, lead_minutes: int) -> None:
    for user_id in (session.student_id, session.tutor_id):
        safe_notify(
            db,
            user_id,
            "session_reminder",
            "Session starting soon",
            f"Your {session.subject} session starts in about {lead_minutes} minutes.",
            {"session_id": session.id},
        )
