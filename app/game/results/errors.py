class GameResultsError(Exception):
    pass


class PlayerNotFoundError(GameResultsError):
    pass


class GameAlreadyRecordedError(GameResultsError):
    pass
