"""Initial schema for the SeeZee assignment core

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy import text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.schema import CheckConstraint, Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import DateTime, JSON, String, Text

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None

Tags = JSON().with_variant(ARRAY(String), "postgresql")
Metadata = JSON().with_variant(JSONB(), "postgresql")
Timestamp = DateTime(timezone=True)


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        Column("user_id", String(22), primary_key=True),
        Column("email", String, unique=True, nullable=False),
        Column("name", String, nullable=False),
        Column("role", String(8), nullable=False),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
        Column("update_time", Timestamp, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    # Learning resources
    op.create_table(
        "learning_resources",
        Column("resource_id", String(22), primary_key=True),
        Column("title", String, nullable=False),
        Column("type", String(13), nullable=False),
        Column("url", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("category", String, nullable=True),
        Column("tags", Tags, nullable=False),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
    )

    # Tools
    op.create_table(
        "tools",
        Column("tool_id", String(22), primary_key=True),
        Column("name", String, nullable=False),
        Column("category", String, nullable=False),
        Column("url", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("pricing", String, nullable=True),
        Column("tags", Tags, nullable=False),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
    )

    # Tasks
    op.create_table(
        "tasks",
        Column("task_id", String(22), primary_key=True),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=False),
        Column("priority", String(6), nullable=False),
        Column("status", String(11), nullable=False),
        Column("due_date", Timestamp, nullable=True),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
        Column("update_time", Timestamp, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    # Assignments, one row per (item, user) or (item, role)
    op.create_table(
        "assignments",
        Column("assignment_id", String(22), primary_key=True),
        Column("item_kind", String(8), nullable=False),
        Column("item_id", String(32), nullable=False),
        Column("audience_type", String(4), nullable=False),
        Column("user_id", String(22), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True),
        Column("role", String(8), nullable=True),
        Column("assigned_by", String(22), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True),
        Column("due_at", Timestamp, nullable=True),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
        CheckConstraint(
            "(audience_type = 'user' AND user_id IS NOT NULL AND role IS NULL)"
            " OR (audience_type = 'role' AND role IS NOT NULL AND user_id IS NULL)",
            name="ck_assignments_single_target",
        ),
    )

    # Completions
    op.create_table(
        "completions",
        Column("completion_id", String(22), primary_key=True),
        Column(
            "assignment_id",
            String(22),
            ForeignKey("assignments.assignment_id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column("user_id", String(22), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        Column("status", String(11), nullable=False),
        Column("started_at", Timestamp, nullable=True),
        Column("completed_at", Timestamp, nullable=True),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
        Column("update_time", Timestamp, server_default=f.now(), onupdate=f.now(), nullable=False),
        UniqueConstraint("assignment_id", "user_id", name="uq_completions_assignment_user"),
    )

    # Activity log
    op.create_table(
        "activities",
        Column("activity_id", String(22), primary_key=True),
        Column("kind", String(18), nullable=False),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=False),
        Column("actor_id", String(22), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True),
        Column("metadata", Metadata, nullable=False),
        Column("create_time", Timestamp, server_default=f.now(), nullable=False),
    )

    # Uniqueness of fan-out, per audience type
    user_audience = text("audience_type = 'user'")
    role_audience = text("audience_type = 'role'")
    op.create_index(
        "uq_assignments_item_user",
        "assignments",
        ["item_id", "user_id"],
        unique=True,
        postgresql_where=user_audience,
        sqlite_where=user_audience,
    )
    op.create_index(
        "uq_assignments_item_role",
        "assignments",
        ["item_id", "role"],
        unique=True,
        postgresql_where=role_audience,
        sqlite_where=role_audience,
    )

    # Create indexes for common queries
    op.create_index("ix_assignments_user_id", "assignments", ["user_id"])
    op.create_index("ix_assignments_role", "assignments", ["role"])
    op.create_index("ix_completions_user_id", "completions", ["user_id"])
    op.create_index("ix_activities_create_time", "activities", ["create_time"])


def downgrade() -> None:
    # Drop indexes
    op.drop_index("ix_activities_create_time", table_name="activities")
    op.drop_index("ix_completions_user_id", table_name="completions")
    op.drop_index("ix_assignments_role", table_name="assignments")
    op.drop_index("ix_assignments_user_id", table_name="assignments")
    op.drop_index("uq_assignments_item_role", table_name="assignments")
    op.drop_index("uq_assignments_item_user", table_name="assignments")

    # Drop tables in reverse order (respecting foreign keys)
    op.drop_table("activities")
    op.drop_table("completions")
    op.drop_table("assignments")
    op.drop_table("tasks")
    op.drop_table("tools")
    op.drop_table("learning_resources")
    op.drop_table("users")
