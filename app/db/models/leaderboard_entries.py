from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        CheckConstraint(
            "difficulty IN ('Beginner','Novice','Intermediate','Expert')",
            name="ck_leaderboard_entries_difficulty",
        ),
        CheckConstraint("score >= 0", name="ck_leaderboard_entries_score_non_negative"),
        CheckConstraint("rank >= 0", name="ck_leaderboard_entries_rank_non_negative"),
        Index("idx_leaderboard_difficulty_score", "difficulty", "score", "achieved_at"),
        Index("idx_leaderboard_score", "score", "achieved_at"),
        Index("idx_leaderboard_difficulty_username_lower", "difficulty", text("lower(username)")),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    rank: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
