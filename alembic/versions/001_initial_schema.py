"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

What:  Creates every table, enum type and index of the membership API.
How:   PostgreSQL specifics: native enum types, gen_random_uuid() and
       CURRENT_TIMESTAMP server defaults, TIMESTAMP WITH TIME ZONE.

Rollback: downgrade() drops all tables and enum types (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = postgresql.ENUM("MEMBER", "ADMIN", name="user_role", create_type=False)
user_status = postgresql.ENUM("ACTIVE", "INACTIVE", name="user_status", create_type=False)
application_status = postgresql.ENUM(
    "PENDING", "APPROVED", "REJECTED", name="application_status", create_type=False
)
invite_status = postgresql.ENUM("PENDING", "COMPLETED", name="invite_status", create_type=False)
referral_status = postgresql.ENUM(
    "SENT", "NEGOTIATING", "CLOSED", "REJECTED", name="referral_status", create_type=False
)
payment_status = postgresql.ENUM("PENDING", "PAID", "OVERDUE", name="payment_status", create_type=False)

ENUMS = (user_role, user_status, application_status, invite_status, referral_status, payment_status)


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
        primary_key=True,
    )


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=nullable,
        server_default=None if nullable else sa.text("CURRENT_TIMESTAMP"),
    )


def _user_fk(name: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    # ── users ─────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="MEMBER"),
        sa.Column("status", user_status, nullable=False, server_default="ACTIVE"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        _timestamp("deleted_at", nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # ── applications ──────────────────────────────────────────────────────
    op.create_table(
        "applications",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", application_status, nullable=False, server_default="PENDING"),
        _user_fk("reviewed_by_id", ondelete="SET NULL", nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_applications_email", "applications", ["email"], unique=True)
    op.create_index("ix_applications_created_at", "applications", ["created_at"])

    # ── invites ───────────────────────────────────────────────────────────
    op.create_table(
        "invites",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("token", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", invite_status, nullable=False, server_default="PENDING"),
        sa.Column(
            "application_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("applications.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
    )
    op.create_index("ix_invites_email", "invites", ["email"])
    op.create_index("ix_invites_created_at", "invites", ["created_at"])

    # ── announcements ─────────────────────────────────────────────────────
    op.create_table(
        "announcements",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk("author_id"),
        _timestamp("created_at"),
    )
    op.create_index("ix_announcements_author_id", "announcements", ["author_id"])
    op.create_index("ix_announcements_created_at", "announcements", ["created_at"])

    # ── meetings / meeting_attendances ────────────────────────────────────
    op.create_table(
        "meetings",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.TIMESTAMP(timezone=True), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_meetings_date", "meetings", ["date"])

    op.create_table(
        "meeting_attendances",
        _id(),
        sa.Column(
            "meeting_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("meetings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("member_id"),
        _timestamp("checked_in_at"),
        sa.UniqueConstraint("meeting_id", "member_id", name="uq_meeting_attendance_member"),
    )
    op.create_index("ix_meeting_attendances_meeting_id", "meeting_attendances", ["meeting_id"])

    # ── one_on_one_meetings ───────────────────────────────────────────────
    op.create_table(
        "one_on_one_meetings",
        _id(),
        _user_fk("member1_id"),
        _user_fk("member2_id"),
        sa.Column("date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_one_on_one_meetings_member1_id", "one_on_one_meetings", ["member1_id"])
    op.create_index("ix_one_on_one_meetings_member2_id", "one_on_one_meetings", ["member2_id"])
    op.create_index("ix_one_on_one_meetings_date", "one_on_one_meetings", ["date"])

    # ── referrals ─────────────────────────────────────────────────────────
    op.create_table(
        "referrals",
        _id(),
        _user_fk("from_member_id"),
        _user_fk("to_member_id"),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", referral_status, nullable=False, server_default="SENT"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_referrals_from_member_id", "referrals", ["from_member_id"])
    op.create_index("ix_referrals_to_member_id", "referrals", ["to_member_id"])
    op.create_index("ix_referrals_created_at", "referrals", ["created_at"])

    # ── thank_yous ────────────────────────────────────────────────────────
    op.create_table(
        "thank_yous",
        _id(),
        _user_fk("from_member_id"),
        _user_fk("to_member_id"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "referral_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("referrals.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
        sa.CheckConstraint("amount IS NULL OR amount >= 0", name="ck_thank_yous_amount_non_negative"),
    )
    op.create_index("ix_thank_yous_from_member_id", "thank_yous", ["from_member_id"])
    op.create_index("ix_thank_yous_to_member_id", "thank_yous", ["to_member_id"])
    op.create_index("ix_thank_yous_created_at", "thank_yous", ["created_at"])

    # ── membership_payments ───────────────────────────────────────────────
    op.create_table(
        "membership_payments",
        _id(),
        _user_fk("member_id"),
        sa.Column("due_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("paid_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", payment_status, nullable=False, server_default="PENDING"),
        _timestamp("created_at"),
        sa.CheckConstraint("amount >= 0", name="ck_membership_payments_amount_non_negative"),
    )
    op.create_index("ix_membership_payments_member_id", "membership_payments", ["member_id"])
    op.create_index("idx_membership_payments_status_due", "membership_payments", ["status", "due_date"])


def downgrade() -> None:
    for table in (
        "membership_payments",
        "thank_yous",
        "referrals",
        "one_on_one_meetings",
        "meeting_attendances",
        "meetings",
        "announcements",
        "invites",
        "applications",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
