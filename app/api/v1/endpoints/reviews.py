# app/api/v1/endpoints/reviews.py
# POST /reviews/  → student reviews a completed session
#
# Listing lives under GET /tutors/{tutor_user_id}/reviews.

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_student
from app.db.session import get_db
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewResponse
from app.services.notification_service import safe_notify
from app.services.reviews import submit_review

router = APIRouter()


@router.post(
    "/",
    response_model=ReviewResponse,
    status_code=201,
    summary="Review a completed session",
)
def create_review(
    payload: ReviewCreate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    """
    One review per student per session, only after the tutor marked it completed.
    The tutor's rating and review count are refreshed in the same transaction.
    """
    review = submit_review(
        db,
        session_id=payload.session_id,
        student_id=current_user.id,
        tutor_id=payload.tutor_id,
        rating=payload.rating,
        comment=payload.comment,
    )
    db.commit()

    safe_notify(
        db,
        review.tutor_id,
        "review_received",
        "New review",
        f"{current_user.full_name} rated your session {review.rating}/5.",
        {"session_id": review.session_id, "review_id": review.id},
    )
    db.commit()

    response = ReviewResponse.model_validate(review)
    response.student_name = current_user.full_name
    return response
