# tests/unit/test_reviews.py

import pytest

from app.core.exceptions import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from app.models.review import Review
from app.services.reviews import list_reviews_for_tutor, round_rating, submit_review
from conftest import book_session, complete_session, make_tutor, make_user


@pytest.fixture()
def completed(db):
    student = make_user(db, "student")
    tutor, profile = make_tutor(db, hourly_rate=1000.0)
    session = complete_session(db, book_session(db, student, tutor, duration=90))
    return student, tutor, profile, session


def test_first_review_sets_rating(db, completed):
    student, tutor, profile, session = completed
    submit_review(db, session.id, student.id, tutor.id, 5, "Great")
    db.refresh(profile)
    assert profile.rating == 5.0
    assert profile.review_count == 1


def test_rating_is_average_of_all_reviews(db, completed):
    student, tutor, profile, session = completed
    other = make_user(db, "student")
    second = complete_session(db, book_session(db, other, tutor))
    third_student = make_user(db, "student")
    third = complete_session(db, book_session(db, third_student, tutor))

    submit_review(db, session.id, student.id, tutor.id, 5)
    submit_review(db, second.id, other.id, tutor.id, 4)
    submit_review(db, third.id, third_student.id, tutor.id, 4)
    db.refresh(profile)

    assert profile.review_count == db.query(Review).filter(Review.tutor_id == tutor.id).count()
    assert profile.rating == 4.3


def test_duplicate_review_conflicts_and_keeps_count(db, completed):
    student, tutor, profile, session = completed
    submit_review(db, session.id, student.id, tutor.id, 4)
    db.commit()

    with pytest.raises(Conflict):
        submit_review(db, session.id, student.id, tutor.id, 1)
    db.refresh(profile)
    assert profile.review_count == 1
    assert profile.rating == 4.0


def test_unknown_session(db, completed):
    student, tutor, _, _ = completed
    with pytest.raises(NotFound):
        submit_review(db, 404, student.id, tutor.id, 5)


def test_session_must_be_completed(db):
    student = make_user(db, "student")
    tutor, _ = make_tutor(db)
    session = book_session(db, student, tutor)
    with pytest.raises(InvalidState):
        submit_review(db, session.id, student.id, tutor.id, 5)


def test_only_the_sessions_student_may_review(db, completed):
    _, tutor, _, session = completed
    stranger = make_user(db, "student")
    with pytest.raises(Forbidden):
        submit_review(db, session.id, stranger.id, tutor.id, 5)


def test_tutor_must_match_session(db, completed):
    student, _, _, session = completed
    other_tutor, _ = make_tutor(db)
    with pytest.raises(ValidationError):
        submit_review(db, session.id, student.id, other_tutor.id, 5)


@pytest.mark.parametrize("rating", [0, 6, True, 4.5])
def test_rating_out_of_range(db, completed, rating):
    student, tutor, _, session = completed
    with pytest.raises(ValidationError):
        submit_review(db, session.id, student.id, tutor.id, rating)


def test_round_half_up():
    assert round_rating(17, 4) == 4.3   # 4.25
    assert round_rating(9, 2) == 4.5
    assert round_rating(0, 0) == 0.0


def test_list_reviews_for_tutor(db, completed):
    student, tutor, _, session = completed
    submit_review(db, session.id, student.id, tutor.id, 3, "ok")
    reviews = list_reviews_for_tutor(db, tutor.id)
    assert [r.rating for r in reviews] == [3]
