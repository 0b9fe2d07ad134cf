# app/schemas/review.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ReviewCreate(BaseModel):
    session_id: int
    tutor_id: int
    rating: int  # 1-5
    comment: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def rating_range(cls, v: int) -> int:
        if not 1 <= v <= 5:
            raise ValueError("Rating must be between 1 and 5")
        return v


class ReviewResponse(BaseModel):
    id: int
    session_id: int
    student_id: int
    tutor_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    student_name: Optional[str] = None

    model_config = {"from_attributes": True}
