# tests/unit/test_session_reminders.py

from datetime import datetime, timezone

from app.jobs.session_reminders import send_due_reminders, session_start
from app.models.notification import Notification
from app.models.tutoring_session import TutoringSession
from app.services import session_lifecycle
from conftest import book_session, make_tutor, make_user

NOW = datetime(2026, 11, 2, 15, 45, tzinfo=timezone.utc)


def _confirmed_session(db, start_time="16:00"):
    student = make_user(db, "student")
    tutor, _ = make_tutor(db)
    session = book_session(
        db, student, tutor,
        date=datetime(2026, 11, 2, tzinfo=timezone.utc),
        start_time=start_time,
    )
    session_lifecycle.set_status(db, session.id, "confirmed", tutor.id)
    db.commit()
    return session


def _reminders(db):
    return db.query(Notification).filter(Notification.notification_type == "session_reminder").all()


def test_session_start_combines_date_and_time(db):
    session = _confirmed_session(db, start_time="16:00")
    assert session_start(session) == datetime(2026, 11, 2, 16, 0, tzinfo=timezone.utc)


def test_reminds_both_participants_once(db):
    session = _confirmed_session(db, start_time="16:00")

    assert send_due_reminders(db, now=NOW) == 1
    assert {n.user_id for n in _reminders(db)} == {session.student_id, session.tutor_id}
    assert session.reminder_sent_at is not None

    assert send_due_reminders(db, now=NOW) == 0
    assert len(_reminders(db)) == 2


def test_sessions_outside_window_are_skipped(db):
    _confirmed_session(db, start_time="17:00")
    assert send_due_reminders(db, now=NOW) == 0
    assert _reminders(db) == []


def test_pending_sessions_are_not_reminded(db):
    student = make_user(db, "student")
    tutor, _ = make_tutor(db)
    book_session(db, student, tutor, date=datetime(2026, 11, 2, tzinfo=timezone.utc), start_time="16:00")
    assert send_due_reminders(db, now=NOW) == 0


def test_booking_date_with_time_of_day_is_reminded(db):
    student = make_user(db, "student")
    tutor, _ = make_tutor(db)
    session = book_session(
        db, student, tutor,
        date=datetime(2026, 11, 2, 18, 0, tzinfo=timezone.utc),
        start_time="16:00",
    )
    session_lifecycle.set_status(db, session.id, "confirmed", tutor.id)
    db.commit()

    assert session_start(session) == datetime(2026, 11, 2, 16, 0, tzinfo=timezone.utc)
    assert send_due_reminders(db, now=NOW) == 1


def test_stored_date_later_than_start_time_is_still_found(db):
    session = _confirmed_session(db, start_time="16:00")
    db.query(TutoringSession).filter(TutoringSession.id == session.id).update(
        {"date": datetime(2026, 11, 2, 23, 30, tzinfo=timezone.utc)},
        synchronize_session=False,
    )
    db.commit()
    db.expire_all()

    assert send_due_reminders(db, now=NOW) == 1
