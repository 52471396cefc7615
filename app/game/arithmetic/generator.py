from __future__ import annotations

import random

from app.game.arithmetic.profiles import get_difficulty_profile, parse_difficulty
from app.game.arithmetic.rounding import round_one_decimal
from app.game.arithmetic.types import Difficulty, DifficultyProfile, MathOperation, MathQuestion

SINGLE_DIGIT_MIN = 1
SINGLE_DIGIT_MAX = 9
TWO_DIGIT_MIN = 10
TWO_DIGIT_MAX = 99


def _addition_operands(
    *,
    difficulty: Difficulty,
    profile: DifficultyProfile,
    rng: random.Random,
) -> tuple[int, int]:
    if difficulty == Difficulty.BEGINNER:
        single = rng.randint(SINGLE_DIGIT_MIN, SINGLE_DIGIT_MAX)
        double = rng.randint(TWO_DIGIT_MIN, TWO_DIGIT_MAX)
        if rng.randint(0, 1) == 0:
            return single, double
        return double, single
    return rng.randint(1, profile.max_value), rng.randint(1, profile.max_value)


def _subtraction_operands(
    *,
    difficulty: Difficulty,
    profile: DifficultyProfile,
    rng: random.Random,
) -> tuple[int, int]:
    if difficulty == Difficulty.BEGINNER:
        return (
            rng.randint(TWO_DIGIT_MIN, TWO_DIGIT_MAX),
            rng.randint(SINGLE_DIGIT_MIN, SINGLE_DIGIT_MAX),
        )
    operand1 = rng.randint(1, profile.max_value)
    operand2 = rng.randint(1, min(operand1, profile.max_value))
    return operand1, operand2


def _multiplication_operands(
    *,
    difficulty: Difficulty,
    profile: DifficultyProfile,
    rng: random.Random,
) -> tuple[int, int]:
    if difficulty == Difficulty.NOVICE:
        operand2 = rng.randint(SINGLE_DIGIT_MIN, SINGLE_DIGIT_MAX)
        operand1 = rng.randint(operand2 + 1, min(profile.max_value, TWO_DIGIT_MAX))
        return operand1, operand2
    upper = TWO_DIGIT_MAX if profile.max_digits <= 2 else 100
    return rng.randint(1, upper), rng.randint(1, upper)


def _division_question_values(
    *,
    difficulty: Difficulty,
    profile: DifficultyProfile,
    rng: random.Random,
) -> tuple[int, int, float]:
    if difficulty == Difficulty.NOVICE:
        # Whole-number division only, never by one.
        divisor = rng.randint(2, min(SINGLE_DIGIT_MAX, profile.max_value))
        multiplier = rng.randint(2, min(profile.max_value // divisor, SINGLE_DIGIT_MAX))
        return divisor * multiplier, divisor, float(multiplier)

    small = profile.max_digits <= 2
    dividend = rng.randint(1, TWO_DIGIT_MAX if small else 1000)
    divisor = rng.randint(1, SINGLE_DIGIT_MAX if small else 100)
    return dividend, divisor, round_one_decimal(dividend / divisor)


def compute_correct_answer(operand1: int, operand2: int, operation: MathOperation) -> float:
    if operation == MathOperation.ADDITION:
        return float(operand1 + operand2)
    if operation == MathOperation.SUBTRACTION:
        return float(operand1 - operand2)
    if operation == MathOperation.MULTIPLICATION:
        return float(operand1 * operand2)
    return round_one_decimal(operand1 / operand2)


def generate_question(
    question_id: int,
    difficulty: Difficulty | str,
    rng: random.Random,
) -> MathQuestion:
    resolved = parse_difficulty(difficulty)
    profile = get_difficulty_profile(resolved)
    operation = rng.choice(profile.allowed_operations)

    if operation == MathOperation.DIVISION:
        operand1, operand2, correct_answer = _division_question_values(
            difficulty=resolved,
            profile=profile,
            rng=rng,
        )
    else:
        if operation == MathOperation.ADDITION:
            builder = _addition_operands
        elif operation == MathOperation.SUBTRACTION:
            builder = _subtraction_operands
        else:
            builder = _multiplication_operands
        operand1, operand2 = builder(difficulty=resolved, profile=profile, rng=rng)
        correct_answer = compute_correct_answer(operand1, operand2, operation)

    return MathQuestion(
        id=question_id,
        operand1=operand1,
        operand2=operand2,
        operation=operation,
        correct_answer=correct_answer,
    )


def generate_game(difficulty: Difficulty | str, rng: random.Random | None = None) -> list[MathQuestion]:
    resolved = parse_difficulty(difficulty)
    profile = get_difficulty_profile(resolved)
    source = rng if rng is not None else random.Random()
    return [
        generate_question(question_id, resolved, source)
        for question_id in range(1, profile.question_count + 1)
    ]
