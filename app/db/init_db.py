# app/db/init_db.py
# Seed demo data into the database
# Run once after migrations: python -m app.db.init_db
#
# Creates:
#   1. A demo tutor with a tutor profile
#   2. A demo student
# Passwords come from SEED_PASSWORD (default below is for local dev only).

import os

from dotenv import load_dotenv

load_dotenv()

import app.db.base  # noqa: F401, E402
from app.core.security import hash_password  # noqa: E402
from app.db.session import SessionLocal  # noqa: E402
from app.services.directory import DirectoryStore  # noqa: E402

DEMO_USERS = [
    {
        "username": "demo_tutor",
        "email": "tutor@studybuddy.local",
        "full_name": "Ayesha Khan",
        "role": "tutor",
        "university": "FAST NUCES",
        "program": "Computer Science",
        "semester": "7",
        "subjects": ["Calculus", "Linear Algebra", "Data Structures"],
        "availability": "Weekdays 4-8pm",
    },
    {
        "username": "demo_student",
        "email": "student@studybuddy.local",
        "full_name": "Bilal Ahmed",
        "role": "student",
        "university": "FAST NUCES",
        "program": "Computer Science",
        "semester": "3",
        "subjects": ["Calculus"],
        "availability": "Weekdays evening",
        "hourly_rate": 1500.0,
    },
]

DEMO_TUTOR_PROFILE = {
    "subjects": ["Calculus", "Linear Algebra", "Data Structures"],
    "hourly_rate": 1000.0,
    "experience": "3 years of peer tutoring, TA for Calculus I.",
    "availability": "Weekdays 4-8pm",
    "is_available_now": True,
}


def seed_users(db) -> None:
    """Create the demo users (and the tutor's profile) if they don't exist."""
    directory = DirectoryStore(db)
    password = os.getenv("SEED_PASSWORD", "StudyBuddy@123")

    for data in DEMO_USERS:
        user = directory.get_user_by_username(data["username"])
        if user:
            print(f"  User already exists: {data['username']}")
        else:
            user = directory.create_user({**data, "hashed_password": hash_password(password)})
            print(f"  User created: {data['username']} ({data['role']})")

        if user.role == "tutor" and not directory.get_tutor_profile_by_user_id(user.id):
            directory.create_tutor_profile({**DEMO_TUTOR_PROFILE, "user_id": user.id})
            print(f"  Tutor profile created for {data['username']}")


def init_db() -> None:
    print("Seeding database...")
    db = SessionLocal()
    try:
        print("\n[1/1] Demo users")
        seed_users(db)

        db.commit()
        print("\nDone. Database seeded successfully.")
    except Exception as e:
        db.rollback()
        print(f"\nERROR: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
