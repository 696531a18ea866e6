"""Initial schema: supplements, user_settings

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Ensure pgcrypto is available for gen_random_uuid()
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "supplements",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("short_name", sa.String(100), nullable=True),
        sa.Column("link", sa.Text, nullable=True),
        sa.Column("dosage", sa.String(200), nullable=True),
        sa.Column("price", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("quantity", sa.Float, nullable=True),
        sa.Column("unit_type", sa.String(16), nullable=False, server_default="pills"),
        sa.Column("timing_type", sa.String(32), nullable=False, server_default="fixed"),
        sa.Column("schedule_am", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("schedule_pm", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("schedule_am_pills", sa.Float, nullable=False, server_default=sa.text("1")),
        sa.Column("schedule_pm_pills", sa.Float, nullable=False, server_default=sa.text("1")),
        sa.Column("offset_minutes", sa.Integer, nullable=True),
        sa.Column("relative_pills", sa.Float, nullable=False, server_default=sa.text("1")),
        sa.Column("cycle_on_days", sa.Integer, nullable=True),
        sa.Column("cycle_off_days", sa.Integer, nullable=True),
        sa.Column("cycle_start_date", sa.Date, nullable=True),
        sa.Column("rating", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("recommended_dosage", sa.Text, nullable=True),
        sa.Column("side_effects", sa.Text, nullable=True),
        sa.Column("ai_analysis", sa.Text, nullable=True),
        sa.Column("archived", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint("price >= 0", name="chk_supplements_price"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="chk_supplements_rating"),
        sa.CheckConstraint(
            "offset_minutes IS NULL OR offset_minutes >= 0", name="chk_supplements_offset"
        ),
        sa.CheckConstraint(
            "timing_type IN ('fixed', 'relative_wake')", name="chk_supplements_timing_type"
        ),
    )
    op.create_index(
        "idx_supplements_user_created", "supplements", ["user_id", sa.text("created_at DESC")]
    )

    op.create_table(
        "user_settings",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("wake_time", sa.String(5), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "wake_time IS NULL OR wake_time ~ '^([01]?[0-9]|2[0-3]):[0-5][0-9]$'",
            name="chk_user_settings_wake_time",
        ),
    )


def downgrade() -> None:
    op.drop_table("user_settings")
    op.drop_index("idx_supplements_user_created", table_name="supplements")
    op.drop_table("supplements")
