# app/services/reviews.py
# Review submission and tutor rating aggregation
#
# A review is unlocked once a session is completed. Each accepted review
# recomputes the tutor's rating and review_count from the full review set while
# the tutor_profiles row is locked, so concurrent reviews for the same tutor
# serialise and the two stats are always written together.

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from app.models.review import Review
from app.models.tutor import TutorProfile
from app.models.tutoring_session import TutoringSession

logger = logging.getLogger("studybuddy.reviews")


def round_rating(total: int, count: int) -> float:
    """Average rounded half-up to one decimal (4.25 → 4.3, not banker's 4.2)."""
    if count == 0:
        return 0.0
    average = Decimal(total) / Decimal(count)
    return float(average.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def submit_review(
    db: Session,
    session_id: int,
    student_id: int,
    tutor_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """
    Persist a review and refresh the tutor's aggregate rating.

    Raises, in order of precedence:
        NotFound        -- no such session
        InvalidState    -- session not completed
        Forbidden       -- student_id is not the session's student
        ValidationError -- tutor_id is not the session's tutor, or rating not 1-5
        Conflict        -- this student already reviewed this session
    """
    session = db.query(TutoringSession).filter(TutoringSession.id == session_id).first()
    if not session:
        raise NotFound("Session not found.")
    if session.status != "completed":
        raise InvalidState("Only completed sessions can be reviewed.")
    if session.student_id != student_id:
        raise Forbidden("Only the student on this session can review it.")
    if session.tutor_id != tutor_id:
        raise ValidationError("Tutor does not match the session's tutor.")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5.")

    existing = db.query(Review).filter(
        Review.session_id == session_id,
        Review.student_id == student_id,
    ).first()
    if existing:
        raise Conflict("You have already reviewed this session.")

    profile = (
        db.query(TutorProfile)
        .filter(TutorProfile.user_id == tutor_id)
        .with_for_update()
        .first()
    )

    review = Review(
        session_id=session_id,
        student_id=student_id,
        tutor_id=tutor_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise Conflict("You have already reviewed this session.")

    if profile is None:
        logger.warning(f"Review {review.id} stored but tutor {tutor_id} has no profile to aggregate into")
        return review

    count, total = db.query(
        func.count(Review.id), func.coalesce(func.sum(Review.rating), 0)
    ).filter(Review.tutor_id == tutor_id).one()

    profile.review_count = count
    profile.rating = round_rating(total, count)
    db.flush()

    logger.info(
        f"Review {review.id} for tutor {tutor_id}: rating={profile.rating} "
        f"review_count={profile.review_count}"
    )
    return review


def list_reviews_for_tutor(db: Session, tutor_id: int) -> List[Review]:
    """Newest first."""
    return (
        db.query(Review)
        .filter(Review.tutor_id == tutor_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
