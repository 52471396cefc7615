from app.db.models.base import Base
from app.db.models.game_players import GamePlayer
from app.db.models.game_records import GameRecord
from app.db.models.leaderboard_entries import LeaderboardEntry

__all__ = [
    "Base",
    "GamePlayer",
    "GameRecord",
    "LeaderboardEntry",
]
