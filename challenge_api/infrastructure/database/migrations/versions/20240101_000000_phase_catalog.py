"""Add phase catalog tables.

Revision ID: 20240101_000
Revises:
Create Date: 2024-01-01 00:00:00.000000

Creates: phase_definitions, timeline_templates
"""

revision = "20240101_000"
down_revision = None

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


def upgrade() -> None:
    # ── phase_definitions ──
    op.create_table(
        "phase_definitions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )

    # ── timeline_templates ──
    op.create_table(
        "timeline_templates",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("phases", JSONB, nullable=False, server_default="'[]'"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    )
    op.create_index("idx_timeline_templates_active", "timeline_templates", ["is_active"])


def downgrade() -> None:
    op.drop_index("idx_timeline_templates_active", table_name="timeline_templates")
    op.drop_table("timeline_templates")
    op.drop_table("phase_definitions")
