LEADERBOARD_SIZE = 10
MAX_ENTRIES_PER_USER = 3
DEFAULT_TOP_COUNT = 10
