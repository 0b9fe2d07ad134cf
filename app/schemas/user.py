# app/schemas/user.py
# User profile schemas. hashed_password is never part of any response model.

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator


class UserResponse(BaseModel):
    """Own profile -- includes contact details."""
    id: int
    username: str
    email: str
    full_name: str
    role: str
    bio: Optional[str] = None
    university: Optional[str] = None
    program: Optional[str] = None
    semester: Optional[str] = None
    location: Optional[str] = None
    subjects: List[str] = []
    availability: Optional[str] = None
    hourly_rate: Optional[float] = None
    profile_image: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: bool
    joined_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PublicUserResponse(BaseModel):
    """Another user's profile, as seen by any logged-in user."""
    id: int
    username: str
    full_name: str
    role: str
    bio: Optional[str] = None
    university: Optional[str] = None
    program: Optional[str] = None
    semester: Optional[str] = None
    location: Optional[str] = None
    subjects: List[str] = []
    availability: Optional[str] = None
    hourly_rate: Optional[float] = None
    profile_image: Optional[str] = None
    joined_at: datetime

    model_config = {"from_attributes": True}


class UserUpdateRequest(BaseModel):
    """PATCH /users/me -- all fields optional."""
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    university: Optional[str] = None
    program: Optional[str] = None
    semester: Optional[str] = None
    location: Optional[str] = None
    subjects: Optional[List[str]] = None
    availability: Optional[str] = None
    hourly_rate: Optional[float] = None
    profile_image: Optional[str] = None
    phone_number: Optional[str] = None

    # Omit a field to leave it unchanged; these columns cannot be cleared
    @field_validator("username", "email", "full_name")
    @classmethod
    def required_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [s.strip() for s in v if s and s.strip()]
