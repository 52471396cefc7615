from app.db.repo.game_players_repo import GamePlayersRepo
from app.db.repo.game_records_repo import GameRecordsRepo
from app.db.repo.leaderboard_repo import LeaderboardRepo

__all__ = [
    "GamePlayersRepo",
    "GameRecordsRepo",
    "LeaderboardRepo",
]
