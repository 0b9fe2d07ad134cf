# app/api/v1/endpoints/students.py
# Student discovery for tutors
#
# GET /students/            → tutor searches students (explicit filters, or
#                             match_profile=true to derive them from the
#                             tutor's own profile)
# GET /students/{id}        → public profile of one student

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login, require_tutor
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import PublicUserResponse
from app.services.directory import DirectoryStore
from app.services.matching import MatchingEngine, StudentFilters, student_filters_for_tutor

router = APIRouter()


@router.get(
    "/",
    response_model=List[PublicUserResponse],
    summary="Tutor searches for students",
)
def search_students(
    subjects: Optional[str] = Query(None, description="Comma-separated, partial match"),
    program: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    availability: Optional[str] = Query(None),
    max_budget: Optional[float] = Query(None, gt=0),
    match_profile: bool = Query(False, description="Use own tutor profile as the filter"),
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db),
):
    """
    Students who have not filled in a field are included for that field --
    the search errs on the side of showing more potential matches.
    """
    if match_profile:
        profile = DirectoryStore(db).get_tutor_profile_by_user_id(current_user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="Tutor profile not found.")
        filters = student_filters_for_tutor(profile, program=program, semester=semester)
    else:
        filters = StudentFilters(
            subjects=subjects,
            program=program,
            semester=semester,
            availability=availability,
            max_budget=max_budget,
        )
    return MatchingEngine(db).search_students(filters)


@router.get(
    "/{student_id}",
    response_model=PublicUserResponse,
    summary="Get a student's public profile",
)
def get_student(
    student_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    student = DirectoryStore(db).get_user(student_id)
    if not student or student.role != "student" or not student.is_active:
        raise HTTPException(status_code=404, detail="Student not found.")
    return student
