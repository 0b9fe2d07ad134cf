# app/schemas/auth.py
# Pydantic request/response models for authentication endpoints

import re
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{3,64}$")


# ── Signup ────────────────────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    username: str
    email: EmailStr
    password: str
    full_name: str
    role: str = "student"  # student | tutor

    # Optional academic profile, editable later via PATCH /users/me
    university: Optional[str] = None
    program: Optional[str] = None
    semester: Optional[str] = None
    subjects: List[str] = []
    availability: Optional[str] = None
    hourly_rate: Optional[float] = None

    @field_validator("username")
    @classmethod
    def valid_username(cls, v: str) -> str:
        v = v.strip()
        if not _USERNAME_RE.match(v):
            raise ValueError("Username must be 3-64 letters, digits, '.', '_' or '-'")
        return v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in ("student", "tutor"):
            raise ValueError("Role must be 'student' or 'tutor'")
        return v

    @field_validator("full_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name cannot be empty")
        return v

    @field_validator("hourly_rate")
    @classmethod
    def rate_positive(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Hourly rate must be positive")
        return v

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s and s.strip()]


# ── Login ─────────────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: str  # username or email
    password: str


# ── Token Responses ───────────────────────────────────────────────────────────

class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expiry

    # User info embedded so frontend doesn't need a second request
    user_id: int
    username: str
    role: str
    full_name: str
    has_tutor_profile: bool


# ── Refresh / Logout ──────────────────────────────────────────────────────────

class RefreshRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: str


# ── Generic Message ───────────────────────────────────────────────────────────

class MessageResponse(BaseModel):
    message: str
