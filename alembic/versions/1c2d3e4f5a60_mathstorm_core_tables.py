"""mathstorm_core_tables

Revision ID: 1c2d3e4f5a60
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "1c2d3e4f5a60"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

DIFFICULTY_CHECK = "difficulty IN ('Beginner','Novice','Intermediate','Expert')"


def upgrade() -> None:
    op.create_table(
        "game_players",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_score", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("best_score", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("last_played_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("games_played >= 0", name="ck_game_players_games_played_non_negative"),
    )
    op.create_index(
        "uq_game_players_username_lower",
        "game_players",
        [sa.text("lower(username)")],
        unique=True,
    )
    op.create_index("idx_game_players_last_played", "game_players", ["last_played_at"])

    op.create_table(
        "game_records",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "player_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("game_players.id"),
            nullable=False,
        ),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.String(length=16), nullable=False),
        sa.Column("total_score", sa.Float(), nullable=False),
        sa.Column(
            "completed_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("analysis", sa.Text(), nullable=True),
        sa.Column(
            "questions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.CheckConstraint(DIFFICULTY_CHECK, name="ck_game_records_difficulty"),
    )
    op.create_index(
        "idx_game_records_player_completed",
        "game_records",
        ["player_id", "completed_at"],
    )

    op.create_table(
        "leaderboard_entries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("difficulty", sa.String(length=16), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("game_id", sa.String(length=64), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column(
            "achieved_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("rank", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint(DIFFICULTY_CHECK, name="ck_leaderboard_entries_difficulty"),
        sa.CheckConstraint("score >= 0", name="ck_leaderboard_entries_score_non_negative"),
        sa.CheckConstraint("rank >= 0", name="ck_leaderboard_entries_rank_non_negative"),
    )
    op.create_index(
        "idx_leaderboard_difficulty_score",
        "leaderboard_entries",
        ["difficulty", "score", "achieved_at"],
    )
    op.create_index("idx_leaderboard_score", "leaderboard_entries", ["score", "achieved_at"])
    op.create_index(
        "idx_leaderboard_difficulty_username_lower",
        "leaderboard_entries",
        ["difficulty", sa.text("lower(username)")],
    )


def downgrade() -> None:
    op.drop_index("idx_leaderboard_difficulty_username_lower", table_name="leaderboard_entries")
    op.drop_index("idx_leaderboard_score", table_name="leaderboard_entries")
    op.drop_index("idx_leaderboard_difficulty_score", table_name="leaderboard_entries")
    op.drop_table("leaderboard_entries")

    op.drop_index("idx_game_records_player_completed", table_name="game_records")
    op.drop_table("game_records")

    op.drop_index("idx_game_players_last_played", table_name="game_players")
    op.drop_index("uq_game_players_username_lower", table_name="game_players")
    op.drop_table("game_players")
