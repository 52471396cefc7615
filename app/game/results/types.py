from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.game.arithmetic.types import Difficulty, MathQuestion


@dataclass(slots=True)
class PlayerSnapshot:
    player_id: UUID
    username: str
    games_played: int
    total_score: float
    best_score: float
    created_at: datetime
    last_played_at: datetime | None


@dataclass(slots=True)
class GameRecordSnapshot:
    game_id: str
    player_id: UUID
    username: str
    difficulty: Difficulty
    total_score: float
    completed_at: datetime
    analysis: str | None
    questions: tuple[MathQuestion, ...]


@dataclass(slots=True)
class GameResultsSummary:
    game_id: str
    total_score: float
    added_to_leaderboard: bool
    leaderboard_rank: int | None
