# app/api/v1/endpoints/tutors.py
# Tutor profile and tutor search endpoints
#
# Search (any logged-in user):
#   GET   /tutors/                       → filter by subjects/program/semester/rate/available-now
#   GET   /tutors/recommended            → student: filters derived from own profile
#
# Tutor flow:
#   POST  /tutors/profile                → create own tutor profile (once)
#   GET   /tutors/me                     → own tutor profile
#   PATCH /tutors/{profile_id}           → update own profile
#
# Public:
#   GET   /tutors/{profile_id}           → one profile with its owner
#   GET   /tutors/{tutor_user_id}/reviews → reviews received by a tutor

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login, require_student, require_tutor
from app.db.session import get_db
from app.models.tutor import TutorProfile
from app.models.user import User
from app.schemas.review import ReviewResponse
from app.schemas.tutor import (
    TutorProfileCreate,
    TutorProfileResponse,
    TutorProfileUpdate,
    TutorSearchItem,
)
from app.schemas.user import PublicUserResponse
from app.services.directory import DirectoryStore
from app.services.matching import MatchingEngine, TutorFilters, tutor_filters_for_student
from app.services.reviews import list_reviews_for_tutor

logger = logging.getLogger("studybuddy.api.tutors")

router = APIRouter()


# ── Helpers ───────────────────────────────────────────────────────────────────

def _search_item(profile: TutorProfile, user: User) -> TutorSearchItem:
    base = TutorProfileResponse.model_validate(profile).model_dump()
    return TutorSearchItem(**base, user=PublicUserResponse.model_validate(user))


# ── Search ────────────────────────────────────────────────────────────────────

@router.get(
    "/",
    response_model=List[TutorSearchItem],
    summary="Search tutors",
)
def search_tutors(
    subjects: Optional[str] = Query(None, description="Comma-separated, partial match"),
    program: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    max_rate: Optional[float] = Query(None, gt=0),
    is_available_now: bool = Query(False),
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    filters = TutorFilters(
        subjects=subjects,
        program=program,
        semester=semester,
        max_rate=max_rate,
        is_available_now=is_available_now,
    )
    rows = MatchingEngine(db).search_tutors(filters)
    return [_search_item(p, u) for p, u in rows]


@router.get(
    "/recommended",
    response_model=List[TutorSearchItem],
    summary="Tutors matching the student's own profile",
)
def recommended_tutors(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    filters = tutor_filters_for_student(current_user)
    logger.debug(f"Recommended tutors for student {current_user.id}: {filters}")
    rows = MatchingEngine(db).search_tutors(filters)
    return [_search_item(p, u) for p, u in rows]


# ── Tutor Profile Management ──────────────────────────────────────────────────

@router.post(
    "/profile",
    response_model=TutorProfileResponse,
    status_code=201,
    summary="Create own tutor profile",
)
def create_profile(
    payload: TutorProfileCreate,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    profile = DirectoryStore(db).create_tutor_profile(
        {**payload.model_dump(), "user_id": current_user.id}
    )
    db.commit()
    return profile


@router.get(
    "/me",
    response_model=TutorProfileResponse,
    summary="Get own tutor profile",
)
def get_own_profile(
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    profile = DirectoryStore(db).get_tutor_profile_by_user_id(current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Tutor profile not found.")
    return profile


@router.get(
    "/{profile_id}",
    response_model=TutorSearchItem,
    summary="Get a tutor profile",
)
def get_profile(
    profile_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    directory = DirectoryStore(db)
    profile = directory.get_tutor_profile(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Tutor profile not found.")
    return _search_item(profile, directory.get_user(profile.user_id))


@router.patch(
    "/{profile_id}",
    response_model=TutorProfileResponse,
    summary="Update own tutor profile",
)
def update_profile(
    profile_id: int,
    payload: TutorProfileUpdate,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    directory = DirectoryStore(db)
    profile = directory.get_tutor_profile(profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Tutor profile not found.")
    if profile.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You can only update your own profile.")

    profile = directory.update_tutor_profile(profile_id, payload.model_dump(exclude_unset=True))
    db.commit()
    return profile


@router.get(
    "/{tutor_user_id}/reviews",
    response_model=List[ReviewResponse],
    summary="Reviews received by a tutor",
)
def tutor_reviews(
    tutor_user_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    directory = DirectoryStore(db)
    tutor = directory.get_user(tutor_user_id)
    if not tutor or tutor.role != "tutor":
        raise HTTPException(status_code=404, detail="Tutor not found.")

    reviews = list_reviews_for_tutor(db, tutor_user_id)
    names = {}
    result = []
    for review in reviews:
        if review.student_id not in names:
            student = directory.get_user(review.student_id)
            names[review.student_id] = student.full_name if student else None
        item = ReviewResponse.model_validate(review)
        item.student_name = names[review.student_id]
        result.append(item)
    return result
