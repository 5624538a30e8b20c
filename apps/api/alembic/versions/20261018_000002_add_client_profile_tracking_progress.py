"""add client profiles, tracking logs and progress photos

Revision ID: 20261018_000002
Revises: 20261018_000001
Create Date: 2026-10-18 00:00:02.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_000002"
down_revision: Union[str, None] = "20261018_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _profile_note_columns():
    return [
        sa.Column("pain_note", sa.String(length=1000), nullable=True),
        sa.Column("goal_note", sa.String(length=1000), nullable=True),
        sa.Column("surgery_history", sa.String(length=1000), nullable=True),
        sa.Column("before_class_memo", sa.String(length=1000), nullable=True),
        sa.Column("after_class_memo", sa.String(length=1000), nullable=True),
        sa.Column("next_lesson_plan", sa.String(length=1000), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "client_profiles",
        sa.Column("client_id", sa.String(), nullable=False),
        *_profile_note_columns(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.PrimaryKeyConstraint("client_id"),
    )

    op.create_table(
        "client_tracking_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        *_profile_note_columns(),
        sa.Column("homework_given", sa.String(length=1000), nullable=True),
        sa.Column("homework_reminder_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_client_tracking_logs_instructor_id"), "client_tracking_logs", ["instructor_id"], unique=False)
    op.create_index(op.f("ix_client_tracking_logs_client_id"), "client_tracking_logs", ["client_id"], unique=False)

    op.create_table(
        "client_progress_photos",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("instructor_id", sa.String(), nullable=False),
        sa.Column("client_id", sa.String(), nullable=False),
        sa.Column("phase", sa.String(length=20), nullable=False, server_default="ETC"),
        sa.Column("note", sa.String(length=500), nullable=True),
        sa.Column("taken_on", sa.Date(), nullable=True),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=120), nullable=False),
        sa.Column("storage_path", sa.String(length=1000), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["instructor_id"], ["instructors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_client_progress_photos_instructor_id"), "client_progress_photos", ["instructor_id"], unique=False)
    op.create_index(op.f("ix_client_progress_photos_client_id"), "client_progress_photos", ["client_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_client_progress_photos_client_id"), table_name="client_progress_photos")
    op.drop_index(op.f("ix_client_progress_photos_instructor_id"), table_name="client_progress_photos")
    op.drop_table("client_progress_photos")
    op.drop_index(op.f("ix_client_tracking_logs_client_id"), table_name="client_tracking_logs")
    op.drop_index(op.f("ix_client_tracking_logs_instructor_id"), table_name="client_tracking_logs")
    op.drop_table("client_tracking_logs")
    op.drop_table("client_profiles")
