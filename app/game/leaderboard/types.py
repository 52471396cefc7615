from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.game.arithmetic.types import Difficulty


@dataclass(slots=True)
class LeaderboardEntrySnapshot:
    id: str
    difficulty: Difficulty
    username: str
    user_id: str
    game_id: str
    score: float
    achieved_at: datetime
    rank: int = 0
