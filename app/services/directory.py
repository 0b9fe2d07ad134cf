# app/services/directory.py
# Directory store: authoritative storage and point lookups for users and
# tutor profiles.
#
# Usage:
#   directory = DirectoryStore(db)
#   user = directory.get_user(7)
#   profile = directory.get_tutor_profile_by_user_id(user.id)
#
# Lookups return None for unknown ids; the caller decides whether that is a 404.
# Writes only flush -- the endpoint (or get_db) owns the commit.

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, ValidationError
from app.models.tutor import TutorProfile
from app.models.user import User

logger = logging.getLogger("studybuddy.directory")

# Keys that update_user() silently drops
_USER_PROTECTED_FIELDS = {"id", "role", "joined_at", "hashed_password", "password"}

# NOT NULL columns: a None in a partial update leaves them unchanged
_USER_REQUIRED_FIELDS = {"username", "email", "full_name", "is_active"}

# Derived stats are owned by the review aggregator
_PROFILE_PROTECTED_FIELDS = {"id", "user_id", "rating", "review_count", "created_at"}


class DirectoryStore:
    """Repository over the users and tutor_profiles tables."""

    def __init__(self, db: Session):
        self.db = db

    # ── Users ─────────────────────────────────────────────────────────────────

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def get_user_by_login(self, identifier: str) -> Optional[User]:
        """Resolve a login identifier that may be either a username or an email."""
        return self.db.query(User).filter(
            or_(User.username == identifier, User.email == identifier.lower())
        ).first()

    def list_users(self, role: Optional[str] = None) -> List[User]:
        query = self.db.query(User).filter(User.is_active == True)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.id).all()

    def create_user(self, data: Dict[str, Any]) -> User:
        """
        Insert a new user. The database assigns the id.

        Raises:
            Conflict: username or email already registered
        """
        email = data["email"].lower()
        if self.get_user_by_username(data["username"]):
            raise Conflict("Username already exists.")
        if self.get_user_by_email(email):
            raise Conflict("An account with this email already exists.")

        user = User(**{**data, "email": email})
        user.joined_at = datetime.now(timezone.utc)
        if user.subjects is None:
            user.subjects = []

        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Username or email already exists.")

        logger.info(f"User created: id={user.id} username={user.username} role={user.role}")
        return user

    def update_user(self, user_id: int, partial: Dict[str, Any]) -> Optional[User]:
        """
        Merge partial fields into an existing user.
        Identity fields and the password cannot be changed through this path.
        Returns None if the user does not exist.
        """
        user = self.get_user(user_id)
        if not user:
            return None

        for field, value in partial.items():
            if field in _USER_PROTECTED_FIELDS:
                continue
            if field in _USER_REQUIRED_FIELDS and value is None:
                continue
            if field == "email":
                value = value.lower()
                existing = self.get_user_by_email(value)
                if existing and existing.id != user.id:
                    raise Conflict("An account with this email already exists.")
            if field == "username":
                existing = self.get_user_by_username(value)
                if existing and existing.id != user.id:
                    raise Conflict("Username already exists.")
            setattr(user, field, value)

        user.updated_at = datetime.now(timezone.utc)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Username or email already exists.")
        return user

    # ── Tutor Profiles ────────────────────────────────────────────────────────

    def get_tutor_profile(self, profile_id: int) -> Optional[TutorProfile]:
        return self.db.query(TutorProfile).filter(TutorProfile.id == profile_id).first()

    def get_tutor_profile_by_user_id(self, user_id: int) -> Optional[TutorProfile]:
        return self.db.query(TutorProfile).filter(TutorProfile.user_id == user_id).first()

    def list_tutor_profiles(self) -> List[TutorProfile]:
        return self.db.query(TutorProfile).order_by(TutorProfile.id).all()

    def create_tutor_profile(self, data: Dict[str, Any]) -> TutorProfile:
        """
        Create the marketplace profile for a tutor.

        Raises:
            ValidationError: owning user missing or not a tutor
            Conflict: the tutor already has a profile
        """
        user = self.get_user(data["user_id"])
        if not user or user.role != "tutor":
            raise ValidationError("Tutor profiles can only be created for tutor accounts.")
        if self.get_tutor_profile_by_user_id(user.id):
            raise Conflict("Tutor profile already exists.")

        fields = {k: v for k, v in data.items() if k not in ("rating", "review_count")}
        profile = TutorProfile(**fields, rating=0.0, review_count=0)
        if profile.subjects is None:
            profile.subjects = []

        self.db.add(profile)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Tutor profile already exists.")

        logger.info(f"Tutor profile created: id={profile.id} user={user.id}")
        return profile

    def update_tutor_profile(self, profile_id: int, partial: Dict[str, Any]) -> Optional[TutorProfile]:
        """
        Merge partial fields into a tutor profile.
        rating and review_count are dropped. Returns None if missing.
        """
        profile = self.get_tutor_profile(profile_id)
        if not profile:
            return None

        for field, value in partial.items():
            if field in _PROFILE_PROTECTED_FIELDS:
                continue
            setattr(profile, field, value)

        profile.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return profile
