from __future__ import annotations

from app.game.arithmetic.errors import UnknownDifficultyError
from app.game.arithmetic.types import Difficulty, DifficultyProfile, MathOperation

ALL_OPERATIONS: tuple[MathOperation, ...] = (
    MathOperation.ADDITION,
    MathOperation.SUBTRACTION,
    MathOperation.MULTIPLICATION,
    MathOperation.DIVISION,
)

DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.BEGINNER: DifficultyProfile(
        question_count=5,
        max_digits=2,
        allowed_operations=(MathOperation.ADDITION, MathOperation.SUBTRACTION),
    ),
    Difficulty.NOVICE: DifficultyProfile(
        question_count=5,
        max_digits=2,
        allowed_operations=ALL_OPERATIONS,
    ),
    Difficulty.INTERMEDIATE: DifficultyProfile(
        question_count=10,
        max_digits=3,
        allowed_operations=ALL_OPERATIONS,
    ),
    Difficulty.EXPERT: DifficultyProfile(
        question_count=10,
        max_digits=4,
        allowed_operations=ALL_OPERATIONS,
    ),
}

# Points per elapsed second; lower difficulties are more forgiving.
TIME_MULTIPLIERS: dict[Difficulty, int] = {
    Difficulty.BEGINNER: 5,
    Difficulty.NOVICE: 10,
    Difficulty.INTERMEDIATE: 15,
    Difficulty.EXPERT: 15,
}


def parse_difficulty(value: Difficulty | str) -> Difficulty:
    if isinstance(value, Difficulty):
        return value
    normalized = str(value).strip().lower()
    for difficulty in Difficulty:
        if difficulty.value.lower() == normalized or difficulty.name.lower() == normalized:
            return difficulty
    raise UnknownDifficultyError(f"unknown difficulty: {value!r}")


def get_difficulty_profile(difficulty: Difficulty | str) -> DifficultyProfile:
    return DIFFICULTY_PROFILES[parse_difficulty(difficulty)]


def get_time_multiplier(difficulty: Difficulty | str) -> int:
    return TIME_MULTIPLIERS[parse_difficulty(difficulty)]
