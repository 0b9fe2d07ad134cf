# tests/unit/test_directory_and_payments.py

import pytest

from app.core.exceptions import Conflict, Forbidden, NotFound, ValidationError
from app.models.payment import PaymentMethod
from app.services import payments
from app.services.directory import DirectoryStore
from conftest import make_user


def _user_data(**overrides):
    data = {
        "username": "ali",
        "email": "Ali@Example.com",
        "hashed_password": "hash",
        "full_name": "Ali Raza",
        "role": "student",
    }
    data.update(overrides)
    return data


# ── Directory ─────────────────────────────────────────────────────────────────

class TestDirectoryStore:
    def test_create_and_lookup(self, db):
        directory = DirectoryStore(db)
        user = directory.create_user(_user_data())

        assert user.id is not None
        assert user.joined_at is not None
        assert directory.get_user_by_username("ali").id == user.id
        assert directory.get_user_by_email("ali@example.com").id == user.id
        assert directory.get_user_by_login("ALI@example.com").id == user.id
        assert directory.get_user(12345) is None

    def test_duplicate_username_conflicts(self, db):
        directory = DirectoryStore(db)
        directory.create_user(_user_data())
        with pytest.raises(Conflict):
            directory.create_user(_user_data(email="other@example.com"))

    def test_duplicate_email_conflicts(self, db):
        directory = DirectoryStore(db)
        directory.create_user(_user_data())
        with pytest.raises(Conflict):
            directory.create_user(_user_data(username="ali2"))

    def test_update_user_drops_protected_fields(self, db):
        user = make_user(db, "student")
        original_hash = user.hashed_password

        updated = DirectoryStore(db).update_user(
            user.id, {"bio": "CS sophomore", "role": "tutor", "hashed_password": "x"}
        )

        assert updated.bio == "CS sophomore"
        assert updated.role == "student"
        assert updated.hashed_password == original_hash

    def test_update_user_ignores_none_for_required_fields(self, db):
        user = make_user(db, "student")
        username, email, full_name = user.username, user.email, user.full_name

        updated = DirectoryStore(db).update_user(
            user.id, {"username": None, "email": None, "full_name": None, "bio": None}
        )
        db.commit()

        assert (updated.username, updated.email, updated.full_name) == (username, email, full_name)
        assert updated.bio is None

    def test_update_user_email_taken(self, db):
        taken = make_user(db, "student")
        user = make_user(db, "student")
        with pytest.raises(Conflict):
            DirectoryStore(db).update_user(user.id, {"email": taken.email.upper()})

    def test_update_missing_user_returns_none(self, db):
        assert DirectoryStore(db).update_user(999, {"bio": "x"}) is None

    def test_tutor_profile_lifecycle(self, db):
        tutor = make_user(db, "tutor")
        directory = DirectoryStore(db)

        profile = directory.create_tutor_profile(
            {"user_id": tutor.id, "subjects": ["Physics"], "hourly_rate": 700.0, "rating": 5.0}
        )
        assert profile.rating == 0.0
        assert profile.review_count == 0
        assert directory.get_tutor_profile_by_user_id(tutor.id).id == profile.id

        with pytest.raises(Conflict):
            directory.create_tutor_profile({"user_id": tutor.id, "subjects": [], "hourly_rate": 500.0})

        updated = directory.update_tutor_profile(profile.id, {"hourly_rate": 800.0, "review_count": 99})
        assert updated.hourly_rate == 800.0
        assert updated.review_count == 0

    def test_profile_requires_tutor_account(self, db):
        student = make_user(db, "student")
        with pytest.raises(ValidationError):
            DirectoryStore(db).create_tutor_profile(
                {"user_id": student.id, "subjects": [], "hourly_rate": 500.0}
            )


# ── Payment Methods ───────────────────────────────────────────────────────────

class TestPaymentMethods:
    def test_single_default(self, db):
        user = make_user(db, "student")
        first = payments.create_payment_method(db, user.id, "jazzcash", "03001234567", is_default=True)
        second = payments.create_payment_method(db, user.id, "bank", "PK00ABCD1234", is_default=True)

        defaults = db.query(PaymentMethod).filter(
            PaymentMethod.user_id == user.id, PaymentMethod.is_default == True
        ).all()
        assert [m.id for m in defaults] == [second.id]

        payments.set_default(db, user.id, first.id)
        defaults = db.query(PaymentMethod).filter(
            PaymentMethod.user_id == user.id, PaymentMethod.is_default == True
        ).all()
        assert [m.id for m in defaults] == [first.id]

    def test_set_default_checks_owner(self, db):
        owner = make_user(db, "student")
        other = make_user(db, "student")
        method = payments.create_payment_method(db, owner.id, "easypaisa", "03331112222")
        with pytest.raises(Forbidden):
            payments.set_default(db, other.id, method.id)
        with pytest.raises(NotFound):
            payments.set_default(db, owner.id, 777)

    def test_defaults_are_per_user(self, db):
        a = make_user(db, "student")
        b = make_user(db, "student")
        mine = payments.create_payment_method(db, a.id, "bank", "1111", is_default=True)
        payments.create_payment_method(db, b.id, "bank", "2222", is_default=True)
        db.refresh(mine)
        assert mine.is_default

    @pytest.mark.parametrize(
        "raw, masked",
        [("03001234567", "****4567"), ("1234", "****"), ("", "")],
    )
    def test_mask_account_number(self, raw, masked):
        assert payments.mask_account_number(raw) == masked
