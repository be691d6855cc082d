"""Create games and game_updates tables.

Revision ID: 20261018_000001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20261018_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("home_team", sa.String(length=100), nullable=False),
        sa.Column("away_team", sa.String(length=100), nullable=False),
        sa.Column("score_home", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("score_away", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("home_lineup_text", sa.Text(), nullable=True),
        sa.Column("away_lineup_text", sa.Text(), nullable=True),
        sa.Column("is_live", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("score_home BETWEEN 0 AND 99", name="ck_games_score_home_range"),
        sa.CheckConstraint("score_away BETWEEN 0 AND 99", name="ck_games_score_away_range"),
    )
    op.create_index("ix_games_is_live", "games", ["is_live"], unique=False)
    op.create_index(
        "uq_games_single_live",
        "games",
        ["is_live"],
        unique=True,
        postgresql_where=sa.text("is_live"),
        sqlite_where=sa.text("is_live"),
    )

    op.create_table(
        "game_updates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("game_id", sa.Integer(), sa.ForeignKey("games.id"), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("url", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "(type = 'html' AND content IS NOT NULL AND url IS NULL)"
            " OR (type IN ('nhl_goal', 'youtube') AND url IS NOT NULL AND content IS NULL)",
            name="ck_game_updates_payload_matches_type",
        ),
    )
    op.create_index(
        "idx_game_updates_game_created",
        "game_updates",
        ["game_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_game_updates_game_created", table_name="game_updates")
    op.drop_table("game_updates")
    op.drop_index("uq_games_single_live", table_name="games")
    op.drop_index("ix_games_is_live", table_name="games")
    op.drop_table("games")
