"""create lesson report schema

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18 00:00:01.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "instructors",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=120), nullable=False),
        sa.Column("display_name", sa.String(length=80), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_instructors_email"), "instructors", ["email"], unique=True)

    op.create_table(
        "auth_users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("username", sa.String(length=80), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_auth_users_username"), "auth_users", ["username"], unique=True)
    op.create_index(op.f("ix_auth_users_instructor_id"), "auth_users", ["instructor_id"], unique=False)

    op.create_table(
        "clients",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("flags_note", sa.String(length=500), nullable=True),
        sa.Column("note", sa.String(length=1000), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clients_instructor_id"), "clients", ["instructor_id"], unique=False)

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("session_start_time", sa.Time(), nullable=True),
        sa.Column("session_type", sa.String(length=20), nullable=False),
        sa.Column("memo", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sessions_instructor_id"), "sessions", ["instructor_id"], unique=False)
    op.create_index(op.f("ix_sessions_client_id"), "sessions", ["client_id"], unique=False)
    op.create_index(op.f("ix_sessions_session_date"), "sessions", ["session_date"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("summary_items", sa.String(length=1000), nullable=True),
        sa.Column("strength_note", sa.String(length=1000), nullable=True),
        sa.Column("improve_note", sa.String(length=1000), nullable=True),
        sa.Column("next_goal", sa.String(length=500), nullable=True),
        sa.Column("homework", sa.String(length=1000), nullable=True),
        sa.Column("pain_change", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id"),
    )
    op.create_index(op.f("ix_reports_instructor_id"), "reports", ["instructor_id"], unique=False)
    op.create_index(op.f("ix_reports_client_id"), "reports", ["client_id"], unique=False)

    op.create_table(
        "report_photos",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("report_id", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=120), nullable=False),
        sa.Column("storage_path", sa.String(length=1000), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_report_photos_report_id"), "report_photos", ["report_id"], unique=False)

    op.create_table(
        "report_shares",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("report_id", sa.String(), nullable=False),
        sa.Column("token", sa.String(length=80), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_viewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_report_shares_report_id"), "report_shares", ["report_id"], unique=False)
    op.create_index(op.f("ix_report_shares_token"), "report_shares", ["token"], unique=True)

    op.create_table(
        "homework_assignments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        sa.Column("content", sa.String(length=1000), nullable=False),
        sa.Column("remind_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_homework_assignments_instructor_id"), "homework_assignments", ["instructor_id"], unique=False)
    op.create_index(op.f("ix_homework_assignments_client_id"), "homework_assignments", ["client_id"], unique=False)
    op.create_index(op.f("ix_homework_assignments_remind_at"), "homework_assignments", ["remind_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_homework_assignments_remind_at"), table_name="homework_assignments")
    op.drop_index(op.f("ix_homework_assignments_client_id"), table_name="homework_assignments")
    op.drop_index(op.f("ix_homework_assignments_instructor_id"), table_name="homework_assignments")
    op.drop_table("homework_assignments")
    op.drop_index(op.f("ix_report_shares_token"), table_name="report_shares")
    op.drop_index(op.f("ix_report_shares_report_id"), table_name="report_shares")
    op.drop_table("report_shares")
    op.drop_index(op.f("ix_report_photos_report_id"), table_name="report_photos")
    op.drop_table("report_photos")
    op.drop_index(op.f("ix_reports_client_id"), table_name="reports")
    op.drop_index(op.f("ix_reports_instructor_id"), table_name="reports")
    op.drop_table("reports")
    op.drop_index(op.f("ix_sessions_session_date"), table_name="sessions")
    op.drop_index(op.f("ix_sessions_client_id"), table_name="sessions")
    op.drop_index(op.f("ix_sessions_instructor_id"), table_name="sessions")
    op.drop_table("sessions")
    op.drop_index(op.f("ix_clients_instructor_id"), table_name="clients")
    op.drop_table("clients")
    op.drop_index(op.f("ix_auth_users_instructor_id"), table_name="auth_users")
    op.drop_index(op.f("ix_auth_users_username"), table_name="auth_users")
    op.drop_table("auth_users")
    op.drop_index(op.f("ix_instructors_email"), table_name="instructors")
    op.drop_table("instructors")
