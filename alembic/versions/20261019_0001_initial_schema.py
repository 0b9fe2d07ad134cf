"""initial studybuddy schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str, nullable: bool = False, index: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable, index=index)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("role", sa.Enum("student", "tutor", name="user_role_enum"), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("university", sa.String(length=255), nullable=True),
        sa.Column("program", sa.String(length=255), nullable=True),
        sa.Column("semester", sa.String(length=32), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("availability", sa.Text(), nullable=True),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _timestamp("joined_at"),
        _timestamp("updated_at"),
        _timestamp("last_login_at", nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(length=255), nullable=False, unique=True),
        _timestamp("expires_at"),
        sa.Column("is_revoked", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"])

    op.create_table(
        "tutor_profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("hourly_rate", sa.Float(), nullable=False),
        sa.Column("experience", sa.Text(), nullable=False),
        sa.Column("availability", sa.Text(), nullable=False),
        sa.Column("is_available_now", sa.Boolean(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("review_count", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("hourly_rate > 0", name="ck_tutor_hourly_rate_positive"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_tutor_rating_range"),
        sa.CheckConstraint("review_count >= 0", name="ck_tutor_review_count"),
    )
    op.create_index("ix_tutor_profiles_user_id", "tutor_profiles", ["user_id"], unique=True)
    op.create_index("ix_tutor_profiles_is_available_now", "tutor_profiles", ["is_available_now"])

    op.create_table(
        "tutoring_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tutor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("session_type", sa.String(length=50), nullable=False),
        _timestamp("date"),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "completed", "cancelled", name="session_status_enum"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("unpaid", "paid", "refunded", name="payment_status_enum"),
            nullable=False,
        ),
        _timestamp("reminder_sent_at", nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("duration > 0", name="ck_session_duration_positive"),
        sa.CheckConstraint("total_amount >= 0", name="ck_session_amount_non_negative"),
    )
    op.create_index("ix_tutoring_sessions_student_id", "tutoring_sessions", ["student_id"])
    op.create_index("ix_tutoring_sessions_tutor_id", "tutoring_sessions", ["tutor_id"])
    op.create_index("ix_tutoring_sessions_date", "tutoring_sessions", ["date"])
    op.create_index("ix_tutoring_sessions_status", "tutoring_sessions", ["status"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "session_id", sa.Integer(),
            sa.ForeignKey("tutoring_sessions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("tutor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.UniqueConstraint("session_id", "student_id", name="uq_review_session_student"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
    )
    op.create_index("ix_reviews_session_id", "reviews", ["session_id"])
    op.create_index("ix_reviews_tutor_id", "reviews", ["tutor_id"])

    op.create_table(
        "conversations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("participant_one_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participant_two_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        _timestamp("last_message_at"),
        _timestamp("created_at"),
        sa.UniqueConstraint("participant_one_id", "participant_two_id", name="uq_conversation_pair"),
        sa.CheckConstraint("participant_one_id < participant_two_id", name="ck_conversation_pair_order"),
    )
    op.create_index("ix_conversations_participant_one_id", "conversations", ["participant_one_id"])
    op.create_index("ix_conversations_participant_two_id", "conversations", ["participant_two_id"])
    op.create_index("ix_conversations_last_message_at", "conversations", ["last_message_at"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "conversation_id", sa.Integer(),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("sender_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("receiver_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("sent", "delivered", "read", name="message_status_enum"),
            nullable=False,
        ),
        _timestamp("sent_at"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"])
    op.create_index("ix_messages_status", "messages", ["status"])

    op.create_table(
        "payment_methods",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("method_type", sa.String(length=50), nullable=False),
        sa.Column("account_number", sa.String(length=64), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_payment_methods_user_id", "payment_methods", ["user_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "notification_type",
            sa.Enum(
                "session_requested", "session_confirmed", "session_completed",
                "session_cancelled", "session_reminder", "new_message",
                "review_received", "payment_received",
                name="notification_type_enum",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("extra_data", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _timestamp("read_at", nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_notification_type", "notifications", ["notification_type"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("payment_methods")
    op.drop_table("messages")
    op.drop_table("conversations")
    op.drop_table("reviews")
    op.drop_table("tutoring_sessions")
    op.drop_table("tutor_profiles")
    op.drop_table("refresh_tokens")
    op.drop_table("users")

    # Postgres keeps enum types after their tables are gone
    bind = op.get_bind()
    for enum_name in (
        "notification_type_enum",
        "message_status_enum",
        "payment_status_enum",
        "session_status_enum",
        "user_role_enum",
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
