# app/api/v1/endpoints/conversations.py
# Direct messaging
#
# GET   /conversations/                   → own conversations, most recent first
# POST  /conversations/                   → get or create conversation with a user
# GET   /conversations/{id}/messages      → messages (marks incoming as read)
# POST  /conversations/{id}/messages      → send a message
# PATCH /conversations/{id}/read          → mark incoming messages read
# PATCH /conversations/{id}/delivered     → mark incoming messages delivered

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login
from app.db.session import get_db
from app.models.conversation import Message
from app.models.user import User
from app.schemas.conversation import (
    ChatMessageResponse,
    ConversationCreate,
    ConversationListItem,
    ConversationMessagesResponse,
    ConversationResponse,
    MarkedResponse,
    MessageCreate,
    ParticipantSummary,
)
from app.services import messaging
from app.services.notification_service import safe_notify

router = APIRouter()


@router.get(
    "/",
    response_model=List[ConversationListItem],
    summary="List own conversations",
)
def list_conversations(
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    items = []
    for conversation, last in messaging.list_conversations_for_user(db, current_user.id):
        other = db.query(User).filter(
            User.id == conversation.other_participant(current_user.id)
        ).first()
        unread = db.query(Message).filter(
            Message.conversation_id == conversation.id,
            Message.receiver_id == current_user.id,
            Message.status != "read",
        ).count()
        items.append(ConversationListItem(
            id=conversation.id,
            other_user=ParticipantSummary.model_validate(other),
            last_message=ChatMessageResponse.model_validate(last) if last else None,
            last_message_at=conversation.last_message_at,
            unread_count=unread,
        ))
    return items


@router.post(
    "/",
    response_model=ConversationResponse,
    summary="Get or start a conversation with another user",
)
def open_conversation(
    payload: ConversationCreate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    conversation = messaging.get_or_create_conversation(db, current_user.id, payload.participant_id)
    db.commit()
    return conversation


@router.get(
    "/{conversation_id}/messages",
    response_model=ConversationMessagesResponse,
    summary="Read a conversation",
)
def get_messages(
    conversation_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    """Opening a conversation marks everything addressed to the reader as read."""
    conversation = messaging.get_conversation_for_participant(db, conversation_id, current_user.id)
    messaging.mark_read(db, conversation_id, current_user.id)
    messages = messaging.list_messages(db, conversation_id, current_user.id)
    db.commit()
    return ConversationMessagesResponse(
        conversation=ConversationResponse.model_validate(conversation),
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=ChatMessageResponse,
    status_code=201,
    summary="Send a message",
)
def send_message(
    conversation_id: int,
    payload: MessageCreate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    message = messaging.send_message(db, conversation_id, current_user.id, payload.content)
    db.commit()

    preview = payload.content if len(payload.content) <= 80 else payload.content[:77] + "..."
    safe_notify(
        db,
        message.receiver_id,
        "new_message",
        f"New message from {current_user.full_name}",
        preview,
        {"conversation_id": conversation_id, "message_id": message.id},
    )
    db.commit()
    return message


@router.patch(
    "/{conversation_id}/read",
    response_model=MarkedResponse,
    summary="Mark incoming messages as read",
)
def mark_read(
    conversation_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    updated = messaging.mark_read(db, conversation_id, current_user.id)
    db.commit()
    return MarkedResponse(updated=updated)


@router.patch(
    "/{conversation_id}/delivered",
    response_model=MarkedResponse,
    summary="Mark incoming messages as delivered",
)
def mark_delivered(
    conversation_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    updated = messaging.mark_delivered(db, conversation_id, current_user.id)
    db.commit()
    return MarkedResponse(updated=updated)
