# app/models/tutor.py
# Tutor marketplace profile: subjects, rate, availability, aggregated rating

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Text,
)
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class TutorProfile(Base):
    """
    One-to-one extension of a User with role='tutor'.

    rating / review_count are derived from the reviews table and are only
    ever written together by the review aggregator -- NEVER by profile updates.
    """
    __tablename__ = "tutor_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    # ── Public Profile ────────────────────────────────────────────────────────
    subjects = Column(JSON, nullable=False, default=list)     # ["Calculus", "Linear Algebra"]
    hourly_rate = Column(Float, nullable=False)
    experience = Column(Text, nullable=False, default="")
    availability = Column(Text, nullable=False, default="")   # "Mon-Fri 2-6pm"
    is_available_now = Column(Boolean, nullable=False, default=False, index=True)

    # ── Stats (denormalised, recomputed from reviews) ─────────────────────────
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    created_at = Column(
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

    __table_args__ = (
        CheckConstraint("hourly_rate > 0", name="ck_tutor_hourly_rate_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_tutor_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_tutor_review_count"),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="tutor_profile")

    def __repr__(self) -> str:
        return f"<TutorProfile user={self.user_id} rating={self.rating} reviews={self.review_count}>"
