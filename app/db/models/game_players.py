from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class GamePlayer(Base):
    __tablename__ = "game_players"
    __table_args__ = (
        CheckConstraint("games_played >= 0", name="ck_game_players_games_played_non_negative"),
        Index("uq_game_players_username_lower", text("lower(username)"), unique=True),
        Index("idx_game_players_last_played", "last_played_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    total_score: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("0"))
    best_score: Mapped[float] = mapped_column(Float, nullable=False, server_default=text("0"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    last_played_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
