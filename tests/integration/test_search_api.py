# tests/integration/test_search_api.py

from conftest import auth_headers, make_tutor, make_user


def test_search_tutors_by_subject_and_rate(client, db):
    viewer = make_user(db, "student")
    calc, _ = make_tutor(db, hourly_rate=800, subjects=["Calculus", "Linear Algebra"])
    make_tutor(db, hourly_rate=2500, subjects=["Calculus"])
    make_tutor(db, hourly_rate=600, subjects=["Biology"])

    response = client.get(
        "/api/v1/tutors/",
        params={"subjects": "calc", "max_rate": 1000},
        headers=auth_headers(viewer),
    )

    assert response.status_code == 200
    hits = response.json()
    assert [hit["user"]["id"] for hit in hits] == [calc.id]
    assert "email" not in hits[0]["user"]


def test_search_requires_login(client):
    assert client.get("/api/v1/tutors/").status_code == 401


def test_recommended_uses_student_profile(client, db):
    student = make_user(db, "student", subjects=["Physics"], program="EE", hourly_rate=1200)
    match, _ = make_tutor(db, hourly_rate=1000, subjects=["Physics"], program="EE")
    make_tutor(db, hourly_rate=1000, subjects=["Physics"], program="CS")
    make_tutor(db, hourly_rate=1500, subjects=["Physics"], program="EE")

    hits = client.get("/api/v1/tutors/recommended", headers=auth_headers(student)).json()

    assert [hit["user"]["id"] for hit in hits] == [match.id]


def test_recommended_is_for_students(client, db):
    tutor, _ = make_tutor(db)
    assert client.get("/api/v1/tutors/recommended", headers=auth_headers(tutor)).status_code == 403


def test_tutor_profile_create_and_update(client, db):
    tutor = make_user(db, "tutor")
    other_tutor, other_profile = make_tutor(db)

    created = client.post(
        "/api/v1/tutors/profile",
        json={"subjects": ["Statistics", ""], "hourly_rate": 900, "availability": "Evenings"},
        headers=auth_headers(tutor),
    )
    assert created.status_code == 201
    profile = created.json()
    assert profile["subjects"] == ["Statistics"]
    assert profile["rating"] == 0.0

    again = client.post(
        "/api/v1/tutors/profile",
        json={"subjects": ["Statistics"], "hourly_rate": 900},
        headers=auth_headers(tutor),
    )
    assert again.status_code == 409

    updated = client.patch(
        f"/api/v1/tutors/{profile['id']}",
        json={"hourly_rate": 950, "is_available_now": True},
        headers=auth_headers(tutor),
    )
    assert updated.json()["hourly_rate"] == 950
    assert updated.json()["is_available_now"] is True

    foreign = client.patch(
        f"/api/v1/tutors/{other_profile.id}",
        json={"hourly_rate": 1},
        headers=auth_headers(tutor),
    )
    assert foreign.status_code == 403

    login = client.get("/api/v1/tutors/me", headers=auth_headers(tutor))
    assert login.json()["id"] == profile["id"]


def test_students_cannot_create_tutor_profiles(client, db):
    student = make_user(db, "student")
    response = client.post(
        "/api/v1/tutors/profile",
        json={"subjects": ["Statistics"], "hourly_rate": 900},
        headers=auth_headers(student),
    )
    assert response.status_code == 403


def test_student_search_includes_incomplete_profiles(client, db):
    tutor, _ = make_tutor(db)
    blank = make_user(db, "student")
    calc = make_user(db, "student", subjects=["Calculus"])
    make_user(db, "student", subjects=["History"])

    hits = client.get(
        "/api/v1/students/",
        params={"subjects": "calculus"},
        headers=auth_headers(tutor),
    ).json()

    assert [hit["id"] for hit in hits] == [blank.id, calc.id]


def test_student_search_match_profile(client, db):
    tutor, _ = make_tutor(db, hourly_rate=1000, subjects=["Calculus"], profile_availability="weekday evenings")
    fits = make_user(db, "student", subjects=["Calculus"], availability="Tuesday evening", hourly_rate=1500)
    make_user(db, "student", subjects=["Calculus"], hourly_rate=500)

    hits = client.get(
        "/api/v1/students/",
        params={"match_profile": "true"},
        headers=auth_headers(tutor),
    ).json()

    assert [hit["id"] for hit in hits] == [fits.id]


def test_match_profile_without_profile(client, db):
    tutor = make_user(db, "tutor")
    response = client.get("/api/v1/students/", params={"match_profile": "true"}, headers=auth_headers(tutor))
    assert response.status_code == 404


def test_student_search_is_for_tutors(client, db):
    student = make_user(db, "student")
    assert client.get("/api/v1/students/", headers=auth_headers(student)).status_code == 403
