# tests/integration/test_auth_api.py

import pytest

from conftest import auth_headers, make_tutor, make_user

SIGNUP = {
    "username": "sara_k",
    "email": "Sara@Example.com",
    "password": "correct-horse",
    "full_name": "Sara Khan",
    "role": "student",
    "program": "Computer Science",
    "subjects": ["Calculus", " "],
}


def test_signup_returns_tokens(client):
    response = client.post("/api/v1/auth/signup", json=SIGNUP)

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["username"] == "sara_k"
    assert body["role"] == "student"
    assert body["has_tutor_profile"] is False


def test_signup_duplicate_username(client):
    client.post("/api/v1/auth/signup", json=SIGNUP)
    response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "other@example.com"})

    assert response.status_code == 409
    assert response.json()["error_code"] == "conflict"


def test_signup_rejects_short_password(client):
    response = client.post("/api/v1/auth/signup", json={**SIGNUP, "password": "short"})
    assert response.status_code == 422


def test_login_by_username_or_email(client):
    client.post("/api/v1/auth/signup", json=SIGNUP)

    by_name = client.post("/api/v1/auth/login", json={"username": "sara_k", "password": "correct-horse"})
    by_email = client.post("/api/v1/auth/login", json={"username": "sara@example.com", "password": "correct-horse"})
    wrong = client.post("/api/v1/auth/login", json={"username": "sara_k", "password": "nope-nope"})

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    assert wrong.status_code == 401


def test_refresh_rotates_token(client):
    tokens = client.post("/api/v1/auth/signup", json=SIGNUP).json()

    rotated = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert rotated.status_code == 200
    assert rotated.json()["refresh_token"] != tokens["refresh_token"]

    reused = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert reused.status_code == 401


def test_logout_revokes_refresh_token(client):
    tokens = client.post("/api/v1/auth/signup", json=SIGNUP).json()

    assert client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]}).status_code == 200
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


def test_me_requires_token(client):
    tokens = client.post("/api/v1/auth/signup", json=SIGNUP).json()

    assert client.get("/api/v1/auth/me").status_code == 401
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "sara@example.com"
    assert me.json()["subjects"] == ["Calculus"]


def test_profile_update_cannot_change_role(client, db):
    tutor, _ = make_tutor(db)
    response = client.patch(
        "/api/v1/users/me",
        json={"bio": "Math TA", "role": "student"},
        headers=auth_headers(tutor),
    )
    assert response.status_code == 200
    assert response.json()["bio"] == "Math TA"
    assert response.json()["role"] == "tutor"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.parametrize("field", ["username", "email", "full_name"])
def test_profile_update_rejects_null_required_fields(client, db, field):
    student = make_user(db, "student")
    response = client.patch("/api/v1/users/me", json={field: None}, headers=auth_headers(student))

    assert response.status_code == 422
    me = client.get("/api/v1/users/me", headers=auth_headers(student)).json()
    assert me[field] == getattr(student, field)


def test_profile_update_username_taken(client, db):
    first = make_user(db, "student")
    second = make_user(db, "student")
    response = client.patch("/api/v1/users/me", json={"username": first.username}, headers=auth_headers(second))

    assert response.status_code == 409
    assert response.json()["error_code"] == "conflict"
