# app/services/matching.py
# Tutor and student search over the directory
#
#   search_tutors()   -- tutor profiles joined with their owner, filtered
#   search_students() -- student users, filtered with optimistic inclusion
#
# Matching is deliberately lenient: case-insensitive partial text matching on
# subjects, keyword overlap on free-text availability. The string heuristics
# live behind MatchStrategy so they can be swapped without touching the
# filter pipeline.
#
# Results come back in id order. There is no relevance ranking.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy.orm import Session

from app.models.tutor import TutorProfile
from app.models.user import User

log = logging.getLogger("studybuddy.matching")

# Filter values the clients send to mean "no filter"
ALL_SUBJECTS = "All Subjects"
ALL_PROGRAMS = "All Programs"
ALL_SEMESTERS = "All Semesters"

DAY_TOKENS = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "mon", "tue", "wed", "thu", "fri", "sat", "sun",
    "weekend", "weekday", "weekdays", "weekends",
    "mon-fri", "sat-sun",
)

TIME_TOKENS = (
    "morning", "afternoon", "evening", "night",
    "am", "pm", "noon", "midnight",
    "early", "late",
)

_SIMPLE_TIME_RE = re.compile(r"\d+\s*(?:am|pm|:\d+)", re.IGNORECASE)
_TIME_RANGE_RE = re.compile(r"\d+\s*(?:-|to|–)\s*\d+\s*(?:am|pm)", re.IGNORECASE)


# ── Filters ───────────────────────────────────────────────────────────────────

@dataclass
class TutorFilters:
    subjects: Union[str, List[str], None] = None  # comma-separated string or list
    program: Optional[str] = None
    semester: Optional[str] = None
    max_rate: Optional[float] = None
    is_available_now: bool = False


@dataclass
class StudentFilters:
    subjects: Union[str, List[str], None] = None  # comma-separated string or list
    program: Optional[str] = None
    semester: Optional[str] = None
    availability: Optional[str] = None
    max_budget: Optional[float] = None


def parse_subjects(value: Union[str, Sequence[str], None]) -> List[str]:
    """
    Normalise a subject filter: comma-separated string or list → trimmed,
    lower-cased, non-empty terms. The "All Subjects" sentinel yields [].
    """
    if value is None:
        return []
    if isinstance(value, str):
        if value.strip() == ALL_SUBJECTS:
            return []
        value = value.split(",")
    return [s.strip().lower() for s in value if s and s.strip() and s.strip() != ALL_SUBJECTS]


def _is_set(value: Optional[str], sentinel: str) -> bool:
    return bool(value) and value != sentinel


# ── Strategy ──────────────────────────────────────────────────────────────────

class MatchStrategy:
    """Text-matching heuristics used by MatchingEngine."""

    def subjects_overlap(self, wanted: Iterable[str], offered: Iterable[str]) -> bool:
        raise NotImplementedError

    def availability_overlap(self, first: str, second: str) -> bool:
        raise NotImplementedError


class LenientMatchStrategy(MatchStrategy):
    """
    Case-insensitive, bidirectional substring matching.

    "calc" matches "Calculus", and "Advanced Calculus" matches "calculus".
    Availability overlaps on a shared day token, a shared time-of-day token,
    or a shared explicit time. When either side names no explicit times the
    time comparison passes.
    """

    def subjects_overlap(self, wanted: Iterable[str], offered: Iterable[str]) -> bool:
        offered = [s.strip().lower() for s in offered if s and s.strip()]
        for term in wanted:
            term = term.strip().lower()
            if not term:
                continue
            for subject in offered:
                if term in subject or subject in term:
                    return True
        return False

    def availability_overlap(self, first: str, second: str) -> bool:
        first = first.lower()
        second = second.lower()

        if any(day in first and day in second for day in DAY_TOKENS):
            return True
        if any(period in first and period in second for period in TIME_TOKENS):
            return True

        first_times = self.extract_times(first)
        second_times = self.extract_times(second)
        if not first_times or not second_times:
            return True

        for a in first_times:
            for b in second_times:
                a_compact = re.sub(r"\s+", "", a)
                b_compact = re.sub(r"\s+", "", b)
                if a in b or b in a or a_compact in b_compact or b_compact in a_compact:
                    return True
        return False

    @staticmethod
    def extract_times(text: str) -> List[str]:
        """Pull explicit times ("2pm", "14:00") and ranges ("2-4pm") out of free text."""
        return _SIMPLE_TIME_RE.findall(text) + _TIME_RANGE_RE.findall(text)


# ── Engine ────────────────────────────────────────────────────────────────────

class MatchingEngine:
    def __init__(self, db: Session, strategy: Optional[MatchStrategy] = None):
        self.db = db
        self.strategy = strategy or LenientMatchStrategy()

    def search_tutors(self, filters: Optional[TutorFilters] = None) -> List[Tuple[TutorProfile, User]]:
        """
        Tutor profiles joined with their owning user.

        Filters apply in order: rate ceiling, available-now flag, program,
        semester, then subjects. A tutor with no subjects never passes a
        subject filter.
        """
        filters = filters or TutorFilters()
        query = (
            self.db.query(TutorProfile, User)
            .join(User, User.id == TutorProfile.user_id)
            .filter(User.is_active == True)
        )

        if filters.max_rate is not None:
            query = query.filter(TutorProfile.hourly_rate <= filters.max_rate)

        if filters.is_available_now:
            query = query.filter(TutorProfile.is_available_now == True)

        if _is_set(filters.program, ALL_PROGRAMS):
            query = query.filter(User.program == filters.program)

        if _is_set(filters.semester, ALL_SEMESTERS):
            query = query.filter(User.semester == filters.semester)

        rows = query.order_by(TutorProfile.id).all()
        log.debug(f"Tutor search: {len(rows)} candidates")

        # Subject matching is a text heuristic, so it runs in Python
        wanted = parse_subjects(filters.subjects)
        if wanted:
            rows = [
                (p, u) for p, u in rows
                if p.subjects and self.strategy.subjects_overlap(wanted, p.subjects)
            ]

        log.debug(f"Tutor search: {len(rows)} matched")
        return rows

    def search_students(self, filters: Optional[StudentFilters] = None) -> List[User]:
        """
        Student users matching the filters.

        Inclusion is optimistic: a student who has not filled in a field
        passes the filter on that field. Budget compares against the
        student's stored hourly_rate (their budget per hour).
        """
        filters = filters or StudentFilters()
        students = (
            self.db.query(User)
            .filter(User.role == "student", User.is_active == True)
            .order_by(User.id)
            .all()
        )
        log.debug(f"Student search: {len(students)} candidates")

        wanted = parse_subjects(filters.subjects)
        if wanted:
            students = [
                s for s in students
                if not s.subjects or self.strategy.subjects_overlap(wanted, s.subjects)
            ]

        if _is_set(filters.program, ALL_PROGRAMS):
            students = [s for s in students if not s.program or s.program == filters.program]

        if _is_set(filters.semester, ALL_SEMESTERS):
            students = [s for s in students if not s.semester or s.semester == filters.semester]

        if filters.availability:
            students = [
                s for s in students
                if not s.availability
                or self.strategy.availability_overlap(filters.availability, s.availability)
            ]

        if filters.max_budget is not None:
            students = [
                s for s in students
                if s.hourly_rate is None or s.hourly_rate >= filters.max_budget
            ]

        log.debug(f"Student search: {len(students)} matched")
        return students


# ── Profile-derived filters ───────────────────────────────────────────────────

def tutor_filters_for_student(student: User) -> TutorFilters:
    """Filters for the "recommended tutors" view, built from a student's own profile."""
    return TutorFilters(
        subjects=list(student.subjects or []) or None,
        program=student.program or None,
        semester=student.semester or None,
        max_rate=student.hourly_rate,
    )


def student_filters_for_tutor(
    profile: TutorProfile,
    program: Optional[str] = None,
    semester: Optional[str] = None,
) -> StudentFilters:
    """Filters for the "interested students" view, built from a tutor's profile."""
    return StudentFilters(
        subjects=list(profile.subjects or []) or None,
        program=program,
        semester=semester,
        availability=profile.availability or None,
        max_budget=profile.hourly_rate,
    )
