"""Initial tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "games",
        sa.Column("app_id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(length=500), nullable=True),
        sa.Column("playtime_forever", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "game_achievement_totals",
        sa.Column("app_id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("total_achievements", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "achievement_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("steam_user_id", sa.String(length=32), nullable=False),
        sa.Column("app_id", sa.Integer(), nullable=False),
        sa.Column("achievement_key", sa.String(length=255), nullable=False),
        sa.Column("achievement_name", sa.String(length=500), nullable=True),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "steam_user_id", "app_id", "achievement_key",
            name="uq_achievement_events_user_app_key",
        ),
    )
    op.create_index("ix_achievement_events_app_id", "achievement_events", ["app_id"])
    op.create_index(
        "idx_achievement_events_user_achieved",
        "achievement_events",
        ["steam_user_id", "achieved_at"],
    )

    op.create_table(
        "webhook_targets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("url", sa.String(length=2048), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("webhook_targets")
    op.drop_index("idx_achievement_events_user_achieved", table_name="achievement_events")
    op.drop_index("ix_achievement_events_app_id", table_name="achievement_events")
    op.drop_table("achievement_events")
    op.drop_table("game_achievement_totals")
    op.drop_table("games")
