class LeaderboardError(Exception):
    pass


class LeaderboardEntryNotFoundError(LeaderboardError):
    pass
