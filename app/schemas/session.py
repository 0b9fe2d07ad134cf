# app/schemas/session.py
# Tutoring session booking and status schemas

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class SessionCreate(BaseModel):
    """
    status / total_amount / payment_status are not accepted from the client:
    new sessions are always pending and priced from the tutor's rate.
    """
    student_id: int
    tutor_id: int
    subject: str
    date: datetime
    start_time: str = "09:00"  # "HH:MM"
    duration: int              # minutes
    description: Optional[str] = None
    session_type: str = "online"

    @field_validator("start_time")
    @classmethod
    def valid_start_time(cls, v: str) -> str:
        if not _HHMM_RE.match(v):
            raise ValueError("start_time must be HH:MM (24h)")
        return v

    @field_validator("subject")
    @classmethod
    def subject_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Subject cannot be empty")
        return v


class SessionStatusUpdate(BaseModel):
    status: str  # confirmed | completed | cancelled


class SessionPaymentUpdate(BaseModel):
    payment_status: str  # unpaid | paid | refunded


class SessionResponse(BaseModel):
    id: int
    student_id: int
    tutor_id: int
    created_by: int
    subject: str
    session_type: str
    date: datetime
    start_time: str
    duration: int
    total_amount: float
    description: Optional[str] = None
    status: str
    payment_status: str
    created_at: datetime
    updated_at: datetime

    # Filled from the joined users by the endpoint
    student_name: Optional[str] = None
    tutor_name: Optional[str] = None

    model_config = {"from_attributes": True}
