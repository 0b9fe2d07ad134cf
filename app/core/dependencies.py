# app/core/dependencies.py
# FastAPI dependency functions for authentication and authorization
#
# The service layer trusts the identity resolved here and never re-derives it.
#   require_login   -- any active user
#   require_student -- role='student'
#   require_tutor   -- role='tutor'

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.session import get_db
from app.models.user import User

# Bearer token extractor -- auto_error=False so we can handle 401 ourselves
bearer_scheme = HTTPBearer(auto_error=False)


# ── Token Extraction ──────────────────────────────────────────────────────────

def _extract_user_from_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
) -> Optional[User]:
    """
    Internal helper: decode Bearer token and load user from DB.
    Returns None if no token, invalid token, or user not found/inactive.
    """
    if not credentials:
        return None

    payload = decode_token(credentials.credentials)
    if not payload:
        return None

    if payload.get("type") != "access":
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

    return db.query(User).filter(
        and_(User.id == user_id, User.is_active == True)
    ).first()


# ── Auth Dependencies ─────────────────────────────────────────────────────────

def require_login(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Requires a valid JWT token. Raises 401 if not authenticated.

    Use for: Any endpoint requiring login but not a specific role.
    """
    user = _extract_user_from_token(credentials, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Please log in.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_student(current_user: User = Depends(require_login)) -> User:
    """Requires role='student'. Raises 403 for tutors."""
    if current_user.role != "student":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student access required.",
        )
    return current_user


def require_tutor(current_user: User = Depends(require_login)) -> User:
    """
    Requires role='tutor'. Raises 403 for other roles.
    Use for: tutor profile management, student search, pending requests.
    """
    if current_user.role != "tutor":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tutor access required.",
        )
    return current_user
