# app/models/conversation.py
# Direct messaging between two users
#
# A conversation is keyed by an unordered participant pair. The pair is stored
# normalised (participant_one_id < participant_two_id) so the unique constraint
# holds regardless of who opened the conversation.

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base_class import Base

MESSAGE_STATUSES = ("sent", "delivered", "read")


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    participant_one_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_two_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    last_message_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("participant_one_id", "participant_two_id", name="uq_conversation_pair"),
        CheckConstraint("participant_one_id < participant_two_id", name="ck_conversation_pair_order"),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.id",
    )

    def other_participant(self, user_id: int) -> int:
        if user_id == self.participant_one_id:
            return self.participant_two_id
        return self.participant_one_id

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.participant_one_id, self.participant_two_id)

    def __repr__(self) -> str:
        return f"<Conversation id={self.id} pair=({self.participant_one_id}, {self.participant_two_id})>"


class Message(Base):
    """
    Immutable once created, except for the status walk sent → delivered → read.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Integer,
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)

    status = Column(
        Enum(*MESSAGE_STATUSES, name="message_status_enum"),
        nullable=False,
        default="sent",
        index=True,
    )
    sent_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    conversation = relationship("Conversation", back_populates="messages")

    def __repr__(self) -> str:
        return f"<Message id={self.id} conversation={self.conversation_id} status={self.status}>"
