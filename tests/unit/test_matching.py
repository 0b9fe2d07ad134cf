# tests/unit/test_matching.py

import pytest

from app.services.matching import (
    LenientMatchStrategy,
    MatchingEngine,
    MatchStrategy,
    StudentFilters,
    TutorFilters,
    parse_subjects,
    student_filters_for_tutor,
    tutor_filters_for_student,
)
from conftest import make_tutor, make_user


def _tutor_ids(rows):
    return [user.id for _, user in rows]


# ── Strategy ──────────────────────────────────────────────────────────────────

class TestLenientStrategy:
    strategy = LenientMatchStrategy()

    def test_subjects_partial_both_directions(self):
        assert self.strategy.subjects_overlap(["calc"], ["Calculus"])
        assert self.strategy.subjects_overlap(["advanced calculus"], ["Calculus"])
        assert not self.strategy.subjects_overlap(["calculus"], ["Biology"])

    def test_shared_day_token(self):
        assert self.strategy.availability_overlap("Weekdays 4-8pm", "weekdays after class")

    def test_shared_time_of_day(self):
        assert self.strategy.availability_overlap("Saturday evening", "Tuesday evening")

    def test_no_explicit_times_passes(self):
        assert self.strategy.availability_overlap("Saturday", "whenever")

    def test_disjoint_explicit_times_fail(self):
        assert not self.strategy.availability_overlap("Sat 9am", "Tue 14:00")

    def test_extract_times(self):
        assert self.strategy.extract_times("mon 2pm, wed 14:30") == ["2pm", "14:30"]


def test_parse_subjects():
    assert parse_subjects(" Calculus , ,Physics ") == ["calculus", "physics"]
    assert parse_subjects(["Calculus", "  "]) == ["calculus"]
    assert parse_subjects("All Subjects") == []
    assert parse_subjects(None) == []


# ── Tutor Search ──────────────────────────────────────────────────────────────

class TestSearchTutors:
    def test_subject_filter(self, db):
        calc, _ = make_tutor(db, subjects=["Calculus"])
        bio, _ = make_tutor(db, subjects=["Biology"])

        rows = MatchingEngine(db).search_tutors(TutorFilters(subjects="calculus"))

        assert calc.id in _tutor_ids(rows)
        assert bio.id not in _tutor_ids(rows)

    def test_tutor_without_subjects_excluded_by_subject_filter(self, db):
        empty, _ = make_tutor(db, subjects=[])
        rows = MatchingEngine(db).search_tutors(TutorFilters(subjects="calculus"))
        assert empty.id not in _tutor_ids(rows)

    def test_no_filters_returns_everyone_in_id_order(self, db):
        first, _ = make_tutor(db)
        second, _ = make_tutor(db, subjects=[])
        assert _tutor_ids(MatchingEngine(db).search_tutors()) == [first.id, second.id]

    def test_rate_and_availability_now(self, db):
        cheap, _ = make_tutor(db, hourly_rate=800, is_available_now=True)
        make_tutor(db, hourly_rate=2000, is_available_now=True)
        make_tutor(db, hourly_rate=500, is_available_now=False)

        rows = MatchingEngine(db).search_tutors(TutorFilters(max_rate=1000, is_available_now=True))
        assert _tutor_ids(rows) == [cheap.id]

    def test_program_and_semester_are_exact(self, db):
        cs, _ = make_tutor(db, program="Computer Science", semester="5")
        make_tutor(db, program="Computer Science", semester="7")
        make_tutor(db, program="Economics", semester="5")

        rows = MatchingEngine(db).search_tutors(TutorFilters(program="Computer Science", semester="5"))
        assert _tutor_ids(rows) == [cs.id]

    def test_sentinels_mean_no_filter(self, db):
        make_tutor(db, program="Economics")
        make_tutor(db, program="Physics")
        rows = MatchingEngine(db).search_tutors(
            TutorFilters(subjects="All Subjects", program="All Programs", semester="All Semesters")
        )
        assert len(rows) == 2

    def test_custom_strategy_is_used(self, db):
        class NothingMatches(MatchStrategy):
            def subjects_overlap(self, wanted, offered):
                return False

            def availability_overlap(self, first, second):
                return False

        make_tutor(db, subjects=["Calculus"])
        rows = MatchingEngine(db, NothingMatches()).search_tutors(TutorFilters(subjects="calculus"))
        assert rows == []


# ── Student Search ────────────────────────────────────────────────────────────

class TestSearchStudents:
    def test_no_filters_returns_every_student(self, db):
        students = [make_user(db, "student") for _ in range(3)]
        make_tutor(db)
        result = MatchingEngine(db).search_students(StudentFilters())
        assert [s.id for s in result] == [s.id for s in students]

    def test_students_without_subjects_are_included(self, db):
        blank = make_user(db, "student", subjects=[])
        calc = make_user(db, "student", subjects=["Calculus II"])
        bio = make_user(db, "student", subjects=["Biology"])

        ids = [s.id for s in MatchingEngine(db).search_students(StudentFilters(subjects=["calculus"]))]
        assert blank.id in ids
        assert calc.id in ids
        assert bio.id not in ids

    def test_missing_program_and_semester_pass(self, db):
        open_ = make_user(db, "student")
        match = make_user(db, "student", program="CS", semester="3")
        make_user(db, "student", program="EE", semester="3")

        ids = [s.id for s in MatchingEngine(db).search_students(StudentFilters(program="CS", semester="3"))]
        assert ids == [open_.id, match.id]

    def test_availability_overlap(self, db):
        evenings = make_user(db, "student", availability="Monday evening")
        unknown = make_user(db, "student")
        clash = make_user(db, "student", availability="Sat 9am")

        result = MatchingEngine(db).search_students(StudentFilters(availability="Tue 6pm, evening"))
        ids = [s.id for s in result]
        assert evenings.id in ids
        assert unknown.id in ids
        assert clash.id not in ids

    def test_budget(self, db):
        rich = make_user(db, "student", hourly_rate=2000)
        unset = make_user(db, "student")
        make_user(db, "student", hourly_rate=500)

        ids = [s.id for s in MatchingEngine(db).search_students(StudentFilters(max_budget=1000))]
        assert ids == [rich.id, unset.id]


# ── Derived Filters ───────────────────────────────────────────────────────────

def test_tutor_filters_for_student(db):
    student = make_user(db, "student", subjects=["Calculus"], program="CS", semester="3", hourly_rate=1200)
    filters = tutor_filters_for_student(student)
    assert filters.subjects == ["Calculus"]
    assert filters.program == "CS"
    assert filters.max_rate == 1200


def test_student_filters_for_tutor(db):
    _, profile = make_tutor(db, hourly_rate=900, subjects=["Physics"], profile_availability="weekends")
    filters = student_filters_for_tutor(profile, semester="4")
    assert filters.subjects == ["Physics"]
    assert filters.availability == "weekends"
    assert filters.max_budget == 900
    assert filters.semester == "4"
    assert filters.program is None


@pytest.mark.parametrize("value", ["Weekends", "Saturday and Sunday mornings"])
def test_weekend_phrasings_overlap(value):
    assert LenientMatchStrategy().availability_overlap("weekends only", value)


def test_deactivated_users_are_left_out_of_search(db):
    active = make_user(db, "student")
    make_user(db, "student", is_active=False)
    listed, _ = make_tutor(db)
    make_tutor(db, is_active=False)

    engine = MatchingEngine(db)
    assert [s.id for s in engine.search_students(StudentFilters())] == [active.id]
    assert _tutor_ids(engine.search_tutors()) == [listed.id]
