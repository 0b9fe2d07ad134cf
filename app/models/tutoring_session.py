# app/models/tutoring_session.py
# A booked tutoring appointment between a student and a tutor
#
# Status lifecycle (owned by app/services/session_lifecycle.py):
#   pending → confirmed → completed
#   pending | confirmed → cancelled
#   completed and cancelled are terminal.
#
# Never mutate `status` directly -- go through set_status() so the
# role checks and the compare-and-set write are applied.

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
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

SESSION_STATUSES = ("pending", "confirmed", "completed", "cancelled")
PAYMENT_STATUSES = ("unpaid", "paid", "refunded")


class TutoringSession(Base):
    __tablename__ = "tutoring_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ── Parties ───────────────────────────────────────────────────────────────
    student_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tutor_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    # ── Booking Details ───────────────────────────────────────────────────────
    subject = Column(String(255), nullable=False)
    session_type = Column(String(50), nullable=False, default="online")   # online | one-on-one | ...
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    start_time = Column(String(5), nullable=False, default="09:00")        # "HH:MM"
    duration = Column(Integer, nullable=False)                             # minutes
    total_amount = Column(Float, nullable=False)                           # rate × duration / 60
    description = Column(Text, nullable=True)

    # ── Status ────────────────────────────────────────────────────────────────
    status = Column(
        Enum(*SESSION_STATUSES, name="session_status_enum"),
        nullable=False,
        default="pending",
        index=True,
    )
    payment_status = Column(
        Enum(*PAYMENT_STATUSES, name="payment_status_enum"),
        nullable=False,
        default="unpaid",
    )

    # Set by the reminder sweep so each session is reminded once
    reminder_sent_at = Column(DateTime(timezone=True), nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────────
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_session_duration_positive"),
        CheckConstraint("total_amount >= 0", name="ck_session_amount_non_negative"),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    student = relationship("User", foreign_keys=[student_id])
    tutor = relationship("User", foreign_keys=[tutor_id])
    reviews = relationship("Review", back_populates="session")

    def __repr__(self) -> str:
        return (
            f"<TutoringSession id={self.id} student={self.student_id} "
            f"tutor={self.tutor_id} status={self.status}>"
        )
