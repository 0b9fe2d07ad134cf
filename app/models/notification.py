# app/models/notification.py
# In-app notification queue for booking, messaging and review events

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base_class import Base

NOTIFICATION_TYPES = (
    "session_requested",   # Student booked a session with a tutor
    "session_confirmed",   # Tutor confirmed a pending session
    "session_completed",   # Tutor marked the session completed -> review unlocked
    "session_cancelled",   # Either party cancelled
    "session_reminder",    # Confirmed session starts soon
    "new_message",         # Direct message received
    "review_received",     # Student reviewed the tutor
    "payment_received",    # Student marked the session paid
)


class Notification(Base):
    """
    In-app notification for a user.
    Created by notification_service.notify() for key platform events.
    Delivered via GET /api/v1/notifications (polled by the client).
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    notification_type = Column(
        Enum(*NOTIFICATION_TYPES, name="notification_type_enum"),
        nullable=False,
        index=True,
    )

    # ── Content ───────────────────────────────────────────────────────────────
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)

    # Related entity ids, e.g. {"session_id": 12} or {"conversation_id": 4}
    # Named extra_data (not metadata -- reserved by SQLAlchemy)
    extra_data = Column(JSON, nullable=True)

    # ── Read Status ───────────────────────────────────────────────────────────
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="notifications")

    def __repr__(self) -> str:
        return (
            f"<Notification user={self.user_id} "
            f"type={self.notification_type} read={self.is_read}>"
        )
