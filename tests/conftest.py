# tests/conftest.py
# Shared fixtures: in-memory SQLite database, FastAPI TestClient, factories
#
# Settings are read at import time, so the environment is pinned before any
# app module is imported.

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["REMINDERS_ENABLED"] = "false"
os.environ["AUTO_MIGRATE_ON_STARTUP"] = "false"

from datetime import datetime, timezone  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import app.db.base  # noqa: F401, E402
from app.core.security import create_access_token  # noqa: E402
from app.db.base_class import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.tutor import TutorProfile  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services import session_lifecycle  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

_ids = count(1)


# ── Database ──────────────────────────────────────────────────────────────────

@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Factories ─────────────────────────────────────────────────────────────────

def make_user(db, role: str = "student", **fields) -> User:
    n = next(_ids)
    data = {
        "username": f"{role}{n}",
        "email": f"{role}{n}@example.com",
        "hashed_password": "not-a-real-hash",
        "full_name": f"{role.title()} {n}",
        "role": role,
        "subjects": [],
    }
    data.update(fields)
    user = User(**data)
    db.add(user)
    db.commit()
    return user


def make_tutor(db, hourly_rate: float = 1000.0, subjects=None, **user_fields):
    """Tutor user plus tutor profile. Returns (user, profile)."""
    profile_fields = {
        "availability": user_fields.pop("profile_availability", "Weekdays 4-8pm"),
        "is_available_now": user_fields.pop("is_available_now", False),
    }
    user = make_user(db, role="tutor", **user_fields)
    profile = TutorProfile(
        user_id=user.id,
        subjects=subjects if subjects is not None else ["Calculus"],
        hourly_rate=hourly_rate,
        experience="",
        rating=0.0,
        review_count=0,
        **profile_fields,
    )
    db.add(profile)
    db.commit()
    return user, profile


def book_session(db, student: User, tutor: User, duration: int = 60, **fields):
    """A pending session booked by the student."""
    params = {
        "subject": "Calculus",
        "date": datetime(2026, 11, 2, tzinfo=timezone.utc),
        "start_time": "16:00",
        "duration": duration,
    }
    params.update(fields)
    session = session_lifecycle.create_session(
        db, caller=student, student_id=student.id, tutor_id=tutor.id, **params
    )
    db.commit()
    return session


def complete_session(db, session):
    session_lifecycle.set_status(db, session.id, "confirmed", session.tutor_id)
    session_lifecycle.set_status(db, session.id, "completed", session.tutor_id)
    db.commit()
    return session


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
