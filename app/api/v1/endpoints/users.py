# app/api/v1/endpoints/users.py
# User profile endpoints
#
# GET   /users/me      → own profile (with contact details)
# PATCH /users/me      → update own profile
# GET   /users/{id}    → public profile of any user

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import PublicUserResponse, UserResponse, UserUpdateRequest
from app.services.directory import DirectoryStore

router = APIRouter()


@router.get("/me", response_model=UserResponse, summary="Get own profile")
def get_me(current_user: User = Depends(require_login)):
    return current_user


@router.patch("/me", response_model=UserResponse, summary="Update own profile")
def update_me(
    payload: UserUpdateRequest,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    """
    Partial update. Only fields present in the request body change.
    Password, role and join date cannot be changed here.
    """
    updates = payload.model_dump(exclude_unset=True)
    user = DirectoryStore(db).update_user(current_user.id, updates)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    db.commit()
    return user


@router.get("/{user_id}", response_model=PublicUserResponse, summary="Get a user's public profile")
def get_user(
    user_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    user = DirectoryStore(db).get_user(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=404, detail="User not found.")
    return user
