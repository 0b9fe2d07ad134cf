# app/models/user.py
# Base user model for both roles: student | tutor
# Tutor-specific marketplace data lives in TutorProfile (separate table)

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class User(Base):
    """
    A registered student or tutor.
    Never hard-deleted -- deactivation goes through is_active.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ── Identity ──────────────────────────────────────────────────────────────
    username = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    profile_image = Column(Text, nullable=True)
    phone_number = Column(String(32), nullable=True)

    # ── Role ──────────────────────────────────────────────────────────────────
    role = Column(
        Enum("student", "tutor", name="user_role_enum"),
        nullable=False,
        default="student",
    )

    # ── Academic Profile (used by matching) ───────────────────────────────────
    bio = Column(Text, nullable=True)
    university = Column(String(255), nullable=True)
    program = Column(String(255), nullable=True)
    semester = Column(String(32), nullable=True)
    location = Column(String(255), nullable=True)
    subjects = Column(JSON, nullable=False, default=list)      # ["Calculus", "Physics"]
    availability = Column(Text, nullable=True)                 # "Weekdays after 5pm"
    # Tutor: advertised rate. Student: budget per hour.
    hourly_rate = Column(Float, nullable=True)

    # ── Account Status ────────────────────────────────────────────────────────
    is_active = Column(Boolean, nullable=False, default=True)

    # ── Timestamps ────────────────────────────────────────────────────────────
    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # ── Relationships ─────────────────────────────────────────────────────────
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan"
    )
    tutor_profile = relationship(
        "TutorProfile", back_populates="user", uselist=False
    )
    payment_methods = relationship("PaymentMethod", back_populates="user")
    notifications = relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username} role={self.role}>"


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # ── Token ─────────────────────────────────────────────────────────────────
    token_hash = Column(String(255), unique=True, nullable=False)  # SHA-256 of the token
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_revoked = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self) -> str:
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.is_revoked}>"
