# app/schemas/conversation.py
# Conversation and message schemas

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


# ── Requests ──────────────────────────────────────────────────────────────────

class ConversationCreate(BaseModel):
    participant_id: int  # the other user


class MessageCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        if len(v) > 5000:
            raise ValueError("Message must be 5000 characters or fewer")
        return v


# ── Responses ─────────────────────────────────────────────────────────────────

class ChatMessageResponse(BaseModel):
    id: int
    conversation_id: int
    sender_id: int
    receiver_id: int
    content: str
    status: str
    sent_at: datetime

    model_config = {"from_attributes": True}


class ParticipantSummary(BaseModel):
    id: int
    username: str
    full_name: str
    role: str
    profile_image: Optional[str] = None

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    id: int
    participant_one_id: int
    participant_two_id: int
    last_message_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationListItem(BaseModel):
    id: int
    other_user: ParticipantSummary
    last_message: Optional[ChatMessageResponse] = None
    last_message_at: datetime
    unread_count: int


class MarkedResponse(BaseModel):
    updated: int


class ConversationMessagesResponse(BaseModel):
    conversation: ConversationResponse
    messages: List[ChatMessageResponse]
