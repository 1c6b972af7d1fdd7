"""Onboarding paths for tools

Revision ID: 002_onboarding
Revises: 001_initial
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import Boolean, DateTime, Integer, String, Text

# revision identifiers, used by Alembic.
revision: str = "002_onboarding"
down_revision: str | None = "001_initial"
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "onboarding_paths",
        Column("onboarding_path_id", String(22), primary_key=True),
        Column("tool_id", String(22), ForeignKey("tools.tool_id", ondelete="CASCADE"), unique=True, nullable=False),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )

    op.create_table(
        "onboarding_steps",
        Column(
            "onboarding_path_id",
            String(22),
            ForeignKey("onboarding_paths.onboarding_path_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column("position", Integer, primary_key=True),
        Column(
            "resource_id",
            String(22),
            ForeignKey("learning_resources.resource_id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column("required", Boolean, nullable=False),
        UniqueConstraint("onboarding_path_id", "resource_id", name="uq_onboarding_steps_path_resource"),
    )


def downgrade() -> None:
    op.drop_table("onboarding_steps")
    op.drop_table("onboarding_paths")
