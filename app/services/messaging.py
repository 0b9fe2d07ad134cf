# app/services/messaging.py
# Direct conversations between two users and message status tracking
#
#   get_or_create_conversation() -- one conversation per unordered user pair
#   send_message()               -- receiver is always the other participant
#   mark_delivered()             -- sent → delivered for messages to the reader
#   mark_read()                  -- sent|delivered → read for messages to the reader
#
# Message status only moves forward: sent → delivered → read.

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.conversation import Conversation, Message
from app.models.user import User

logger = logging.getLogger("studybuddy.messaging")


def _ordered_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


def _find_conversation(db: Session, user_a: int, user_b: int) -> Optional[Conversation]:
    first, second = _ordered_pair(user_a, user_b)
    return db.query(Conversation).filter(
        Conversation.participant_one_id == first,
        Conversation.participant_two_id == second,
    ).first()


def get_conversation_for_participant(db: Session, conversation_id: int, user_id: int) -> Conversation:
    """Load a conversation the user takes part in. NotFound / Forbidden otherwise."""
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not conversation:
        raise NotFound("Conversation not found.")
    if not conversation.has_participant(user_id):
        raise Forbidden("You are not a participant in this conversation.")
    return conversation


# ── Conversations ─────────────────────────────────────────────────────────────

def get_or_create_conversation(db: Session, user_a: int, user_b: int) -> Conversation:
    """
    Return the conversation between two users, creating it if absent.
    Argument order does not matter.
    """
    if user_a == user_b:
        raise ValidationError("You cannot start a conversation with yourself.")

    for user_id in (user_a, user_b):
        if not db.query(User).filter(User.id == user_id).first():
            raise NotFound(f"User {user_id} not found.")

    existing = _find_conversation(db, user_a, user_b)
    if existing:
        return existing

    first, second = _ordered_pair(user_a, user_b)
    now = datetime.now(timezone.utc)
    conversation = Conversation(
        participant_one_id=first,
        participant_two_id=second,
        last_message_at=now,
        created_at=now,
    )
    db.add(conversation)
    try:
        db.flush()
    except IntegrityError:
        # Another request created the same pair first
        db.rollback()
        existing = _find_conversation(db, user_a, user_b)
        if existing:
            return existing
        raise

    logger.info(f"Conversation {conversation.id} opened between {first} and {second}")
    return conversation


def list_conversations_for_user(db: Session, user_id: int) -> List[Tuple[Conversation, Optional[Message]]]:
    """Each conversation with its latest message, most recently active first."""
    conversations = (
        db.query(Conversation)
        .filter(
            or_(
                Conversation.participant_one_id == user_id,
                Conversation.participant_two_id == user_id,
            )
        )
        .order_by(Conversation.last_message_at.desc(), Conversation.id.desc())
        .all()
    )
    result = []
    for conversation in conversations:
        last = (
            db.query(Message)
            .filter(Message.conversation_id == conversation.id)
            .order_by(Message.id.desc())
            .first()
        )
        result.append((conversation, last))
    return result


# ── Messages ──────────────────────────────────────────────────────────────────

def send_message(db: Session, conversation_id: int, sender_id: int, body: str) -> Message:
    conversation = get_conversation_for_participant(db, conversation_id, sender_id)

    if not body or not body.strip():
        raise ValidationError("Message cannot be empty.")

    now = datetime.now(timezone.utc)
    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        receiver_id=conversation.other_participant(sender_id),
        content=body,
        status="sent",
        sent_at=now,
    )
    db.add(message)
    conversation.last_message_at = now
    db.flush()

    logger.debug(f"Message {message.id} in conversation {conversation.id} from {sender_id}")
    return message


def list_messages(db: Session, conversation_id: int, user_id: int) -> List[Message]:
    """Messages in send order. Caller must be a participant."""
    get_conversation_for_participant(db, conversation_id, user_id)
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.sent_at, Message.id)
        .all()
    )


def _advance_status(db: Session, conversation_id: int, reader_id: int, sources, target: str) -> int:
    get_conversation_for_participant(db, conversation_id, reader_id)
    messages = db.query(Message).filter(
        Message.conversation_id == conversation_id,
        Message.receiver_id == reader_id,
        Message.status.in_(sources),
    ).all()
    for message in messages:
        message.status = target
    db.flush()
    return len(messages)


def mark_read(db: Session, conversation_id: int, reader_id: int) -> int:
    """
    Mark every message addressed to reader_id as read.
    Messages the reader sent are untouched. Returns how many changed (0 on repeat).
    """
    changed = _advance_status(db, conversation_id, reader_id, ("sent", "delivered"), "read")
    if changed:
        logger.debug(f"Conversation {conversation_id}: {changed} messages read by {reader_id}")
    return changed


def mark_delivered(db: Session, conversation_id: int, reader_id: int) -> int:
    """sent → delivered for messages addressed to reader_id. Never downgrades read."""
    return _advance_status(db, conversation_id, reader_id, ("sent",), "delivered")


def unread_count(db: Session, user_id: int) -> int:
    return db.query(Message).filter(
        Message.receiver_id == user_id,
        Message.status != "read",
    ).count()
