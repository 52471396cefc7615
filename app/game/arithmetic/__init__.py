from app.game.arithmetic.errors import ArithmeticGameError, UnknownDifficultyError
from app.game.arithmetic.generator import generate_game, generate_question
from app.game.arithmetic.profiles import get_difficulty_profile, parse_difficulty
from app.game.arithmetic.scoring import score_answer
from app.game.arithmetic.session import advance_question, create_game, start_question, submit_answer
from app.game.arithmetic.types import (
    Difficulty,
    DifficultyProfile,
    GameSession,
    MathOperation,
    MathQuestion,
    ScoreBreakdown,
)

__all__ = [
    "ArithmeticGameError",
    "Difficulty",
    "DifficultyProfile",
    "GameSession",
    "MathOperation",
    "MathQuestion",
    "ScoreBreakdown",
    "UnknownDifficultyError",
    "advance_question",
    "create_game",
    "generate_game",
    "generate_question",
    "get_difficulty_profile",
    "parse_difficulty",
    "score_answer",
    "start_question",
    "submit_answer",
]
