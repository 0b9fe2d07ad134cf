# app/db/base.py
# Alembic model registry -- imports Base + every model so Alembic detects all tables.
# Do NOT import this file from model files (use app.db.base_class instead).
# This file is imported by:
#   - alembic/env.py        (schema detection)
#   - app/db/init_db.py     (seeding)
#   - endpoint modules      (registers all models so relationships resolve)

from app.db.base_class import Base  # noqa: F401

# ── Import all models here so Alembic can detect them ────────────────────────
# Order matters: parent tables before child tables (foreign key dependencies)

from app.models.user import User, RefreshToken                          # noqa: F401, E402
from app.models.tutor import TutorProfile                               # noqa: F401, E402
from app.models.tutoring_session import TutoringSession                 # noqa: F401, E402
from app.models.review import Review                                    # noqa: F401, E402
from app.models.conversation import Conversation, Message               # noqa: F401, E402
from app.models.payment import PaymentMethod                            # noqa: F401, E402
from app.models.notification import Notification                        # noqa: F401, E402
