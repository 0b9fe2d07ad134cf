# app/api/v1/endpoints/auth.py
# Authentication endpoints
#
# POST /auth/signup   -- username + email + password signup
# POST /auth/login    -- username or email; returns access + refresh token
# POST /auth/refresh  -- rotate refresh token, issue new access token
# POST /auth/logout   -- revoke refresh token
# GET  /auth/me       -- current user

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import and_
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401 -- registers all models so relationships resolve
from app.core.config import settings
from app.core.dependencies import require_login
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_token_expiry,
    hash_password,
    hash_token,
    verify_password,
)
from app.db.session import get_db
from app.models.user import RefreshToken, User
from app.schemas.auth import (
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
)
from app.schemas.user import UserResponse
from app.services.directory import DirectoryStore

logger = logging.getLogger("studybuddy.auth")

router = APIRouter()


# Helper
def _build_token_response(user: User, db: Session) -> TokenResponse:
    access_token = create_access_token(user.id, user.role)
    refresh_token = create_refresh_token(user.id)
    db_token = RefreshToken(
        user_id=user.id,
        token_hash=hash_token(refresh_token),
        expires_at=get_token_expiry(days=settings.refresh_token_expire_days),
    )
    db.add(db_token)
    db.flush()
    has_profile = DirectoryStore(db).get_tutor_profile_by_user_id(user.id) is not None
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expire_minutes * 60,
        user_id=user.id,
        username=user.username,
        role=user.role,
        full_name=user.full_name,
        has_tutor_profile=has_profile,
    )


# Signup
@router.post("/signup", response_model=TokenResponse, status_code=201, summary="Sign up with username and password")
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude={"password"})
    data["hashed_password"] = hash_password(payload.password)
    user = DirectoryStore(db).create_user(data)
    response = _build_token_response(user, db)
    db.commit()
    return response


# Login
@router.post("/login", response_model=TokenResponse, summary="Log in with username or email")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = DirectoryStore(db).get_user_by_login(payload.username.strip())
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Incorrect username or password.")
    if not verify_password(payload.password, user.hashed_password):
        logger.warning(f"Failed login for {payload.username!r}")
        raise HTTPException(status_code=401, detail="Incorrect username or password.")
    user.last_login_at = datetime.now(timezone.utc)
    response = _build_token_response(user, db)
    db.commit()
    return response


# Refresh
@router.post("/refresh", response_model=TokenResponse, summary="Rotate refresh token and get a new access token")
def refresh_token(payload: RefreshRequest, db: Session = Depends(get_db)):
    token_payload = decode_token(payload.refresh_token)
    if not token_payload or token_payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token.")
    try:
        user_id = int(token_payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token.")
    token_hash = hash_token(payload.refresh_token)
    db_token = db.query(RefreshToken).filter(
        and_(
            RefreshToken.user_id == user_id,
            RefreshToken.token_hash == token_hash,
            RefreshToken.is_revoked == False,
            RefreshToken.expires_at > datetime.now(timezone.utc),
        )
    ).first()
    if not db_token:
        raise HTTPException(status_code=401, detail="Refresh token has been revoked or expired.")
    db_token.is_revoked = True
    user = db.query(User).filter(and_(User.id == user_id, User.is_active == True)).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found.")
    response = _build_token_response(user, db)
    db.commit()
    return response


# Logout
@router.post("/logout", response_model=MessageResponse, summary="Log out and revoke refresh token")
def logout(payload: LogoutRequest, db: Session = Depends(get_db)):
    db_token = db.query(RefreshToken).filter(RefreshToken.token_hash == hash_token(payload.refresh_token)).first()
    if db_token:
        db_token.is_revoked = True
        db.commit()
    return MessageResponse(message="Logged out successfully.")


# Me
@router.get("/me", response_model=UserResponse, summary="Current user")
def me(current_user: User = Depends(require_login)):
    return current_user
