# app/jobs/session_reminders.py
# Periodic sweep that reminds both participants shortly before a confirmed
# session starts.
#
# A session starts at its calendar date + start_time ("HH:MM", UTC). Sessions
# whose start falls within reminder_lead_minutes ± 1 of now get one reminder
# each for student and tutor; reminder_sent_at marks them so later sweeps skip
# them.
#
# Run once by hand:
#   python -m app.jobs.session_reminders

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import SessionLocal
from app.models.tutoring_session import TutoringSession
from app.services.notification_service import notify_session_reminder

logger = logging.getLogger("studybuddy.jobs.reminders")

# Global scheduler instance
scheduler = BackgroundScheduler(timezone="UTC")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def session_start(session: TutoringSession) -> datetime:
    """Combine the session's calendar date with its HH:MM start time."""
    day = _as_utc(session.date)
    hour, minute = (int(part) for part in session.start_time.split(":"))
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def send_due_reminders(db: Session, now: Optional[datetime] = None) -> int:
    """
    Notify participants of confirmed sessions starting in about
    reminder_lead_minutes. Returns the number of sessions reminded.
    Safe to run repeatedly.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    lead = settings.reminder_lead_minutes
    window_start = now + timedelta(minutes=lead - 1)
    window_end = now + timedelta(minutes=lead + 1)

    # Prefilter on whole calendar days; start_time decides the exact match
    first_day = window_start.replace(hour=0, minute=0, second=0, microsecond=0)
    after_last_day = window_end.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)

    candidates = (
        db.query(TutoringSession)
        .filter(
            TutoringSession.status == "confirmed",
            TutoringSession.reminder_sent_at.is_(None),
            TutoringSession.date >= first_day,
            TutoringSession.date < after_last_day,
        )
        .order_by(TutoringSession.id)
        .all()
    )

    reminded = 0
    for session in candidates:
        try:
            start = session_start(session)
        except ValueError:
            logger.warning(f"Session {session.id} has unparseable start_time {session.start_time!r}")
            continue
        if not window_start <= start <= window_end:
            continue

        session.reminder_sent_at = now
        db.commit()
        notify_session_reminder(db, session, lead)
        db.commit()
        reminded += 1
        logger.info(f"Reminder sent for session {session.id} starting {start.isoformat()}")

    return reminded


def run_reminder_sweep() -> None:
    """Scheduler entry point -- owns its own DB session."""
    db = SessionLocal()
    try:
        count = send_due_reminders(db)
        if count:
            logger.info(f"Reminder sweep: {count} sessions reminded")
    except Exception as e:
        db.rollback()
        logger.error(f"Reminder sweep failed: {e}", exc_info=True)
    finally:
        db.close()


def start_scheduler() -> None:
    scheduler.add_job(
        run_reminder_sweep,
        trigger=IntervalTrigger(seconds=settings.reminder_interval_seconds),
        id="session_reminders",
        name="Send session reminders",
        replace_existing=True,
        coalesce=True,    # Combine missed runs into single execution
        max_instances=1,
    )
    scheduler.start()
    logger.info(f"Reminder scheduler started (every {settings.reminder_interval_seconds}s)")


def stop_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Reminder scheduler stopped")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    run_reminder_sweep()
