class ArithmeticGameError(Exception):
    pass


class UnknownDifficultyError(ArithmeticGameError, ValueError):
    pass
