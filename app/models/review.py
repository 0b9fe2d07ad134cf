# app/models/review.py
# Student review of a completed tutoring session

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class Review(Base):
    """
    One review per (session, student).
    Submitting a review recomputes the tutor's rating / review_count.
    """
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        Integer,
        ForeignKey("tutoring_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    tutor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)   # 1-5 stars
    comment = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("session_id", "student_id", name="uq_review_session_student"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    session = relationship("TutoringSession", back_populates="reviews")
    student = relationship("User", foreign_keys=[student_id])

    def __repr__(self) -> str:
        return f"<Review session={self.session_id} tutor={self.tutor_id} rating={self.rating}>"
