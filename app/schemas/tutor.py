# app/schemas/tutor.py
# Tutor profile and search result schemas

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.user import PublicUserResponse


def _clean_subjects(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    return [s.strip() for s in v if s and s.strip()]


# ── Requests ──────────────────────────────────────────────────────────────────

class TutorProfileCreate(BaseModel):
    subjects: List[str]
    hourly_rate: float
    experience: str = ""
    availability: str = ""
    is_available_now: bool = False

    @field_validator("hourly_rate")
    @classmethod
    def rate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Hourly rate must be positive")
        return v

    @field_validator("subjects")
    @classmethod
    def subjects_clean(cls, v: List[str]) -> List[str]:
        return _clean_subjects(v)


class TutorProfileUpdate(BaseModel):
    """
    PATCH /tutors/{id} -- all fields optional.
    rating and review_count are not accepted; they follow from reviews.
    """
    subjects: Optional[List[str]] = None
    hourly_rate: Optional[float] = None
    experience: Optional[str] = None
    availability: Optional[str] = None
    is_available_now: Optional[bool] = None

    @field_validator("hourly_rate")
    @classmethod
    def rate_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Hourly rate must be positive")
        return v

    @field_validator("subjects")
    @classmethod
    def subjects_clean(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_subjects(v)


# ── Responses ─────────────────────────────────────────────────────────────────

class TutorProfileResponse(BaseModel):
    id: int
    user_id: int
    subjects: List[str]
    hourly_rate: float
    experience: str
    availability: str
    is_available_now: bool
    rating: float
    review_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TutorSearchItem(TutorProfileResponse):
    """Profile joined with the owning user -- shape of every tutor search hit."""
    user: PublicUserResponse
