from __future__ import annotations

import random
import time
from collections.abc import Callable

import structlog

from app.game.arithmetic.generator import generate_game
from app.game.arithmetic.profiles import parse_difficulty
from app.game.arithmetic.rounding import round_one_decimal
from app.game.arithmetic.scoring import score_answer
from app.game.arithmetic.types import Difficulty, GameSession

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]


def create_game(difficulty: Difficulty | str, rng: random.Random | None = None) -> GameSession:
    resolved = parse_difficulty(difficulty)
    return GameSession(difficulty=resolved, questions=generate_game(resolved, rng))


def start_question(game: GameSession, *, now: float | None = None, clock: Clock = time.monotonic) -> None:
    game.question_started_at = clock() if now is None else now


def submit_answer(
    game: GameSession,
    user_answer: float,
    *,
    now: float | None = None,
    clock: Clock = time.monotonic,
) -> None:
    question = game.current_question
    if question is None or game.question_started_at is None:
        logger.debug(
            "submit_answer_ignored",
            has_question=question is not None,
            timer_started=game.question_started_at is not None,
            question_index=game.current_question_index,
        )
        return

    finished_at = clock() if now is None else now
    elapsed_seconds = round_one_decimal(finished_at - game.question_started_at)
    breakdown = score_answer(
        correct_answer=question.correct_answer,
        user_answer=user_answer,
        elapsed_seconds=elapsed_seconds,
        difficulty=game.difficulty,
    )

    question.user_answer = user_answer
    question.elapsed_seconds = elapsed_seconds
    question.percent_difference = breakdown.percent_difference
    question.accuracy_score = breakdown.accuracy_score
    question.time_score = breakdown.time_score
    question.score = breakdown.score


def advance_question(game: GameSession) -> None:
    game.current_question_index += 1
    game.question_started_at = None
