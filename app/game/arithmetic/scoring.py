"""Composite accuracy/speed scoring. Lower scores are better."""

from __future__ import annotations

from app.game.arithmetic.profiles import get_time_multiplier
from app.game.arithmetic.rounding import round_one_decimal
from app.game.arithmetic.types import Difficulty, ScoreBreakdown

MAX_PERCENT_DIFFERENCE = 200.0
ACCURACY_WEIGHT = 3
FULL_RATE_SECONDS = 10.0
LEGACY_TIME_FACTOR = 10.0


def percent_difference(correct_answer: float, user_answer: float) -> float:
    if correct_answer == 0 and user_answer == 0:
        return 0.0
    if correct_answer == 0:
        return MAX_PERCENT_DIFFERENCE

    difference = abs(correct_answer - user_answer)
    raw_percent = difference / abs(correct_answer) * 100
    # Also catches inf and nan answers.
    if not raw_percent < MAX_PERCENT_DIFFERENCE:
        return MAX_PERCENT_DIFFERENCE
    return min(round_one_decimal(raw_percent), MAX_PERCENT_DIFFERENCE)


def time_score(elapsed_seconds: float, difficulty: Difficulty | str) -> float:
    """Full multiplier for the first ten seconds, half rate after that."""
    if elapsed_seconds < 0:
        raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")

    multiplier = get_time_multiplier(difficulty)
    if elapsed_seconds <= FULL_RATE_SECONDS:
        return elapsed_seconds * multiplier
    return FULL_RATE_SECONDS * multiplier + (elapsed_seconds - FULL_RATE_SECONDS) * (multiplier / 2)


def score_answer(
    *,
    correct_answer: float,
    user_answer: float,
    elapsed_seconds: float,
    difficulty: Difficulty | str,
) -> ScoreBreakdown:
    percent = percent_difference(correct_answer, user_answer)
    accuracy = percent * ACCURACY_WEIGHT
    timing = time_score(elapsed_seconds, difficulty)
    return ScoreBreakdown(
        percent_difference=percent,
        accuracy_score=round_one_decimal(accuracy),
        time_score=round_one_decimal(timing),
        score=round_one_decimal(accuracy + timing),
    )


def legacy_score(*, percent: float, elapsed_seconds: float) -> float:
    """Superseded formula kept for comparing old game records."""
    return round_one_decimal(percent * elapsed_seconds + elapsed_seconds * LEGACY_TIME_FACTOR)
