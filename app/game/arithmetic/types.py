from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    NOVICE = "Novice"
    INTERMEDIATE = "Intermediate"
    EXPERT = "Expert"


class MathOperation(str, Enum):
    ADDITION = "Addition"
    SUBTRACTION = "Subtraction"
    MULTIPLICATION = "Multiplication"
    DIVISION = "Division"

    @property
    def symbol(self) -> str:
        return OPERATION_SYMBOLS[self]


OPERATION_SYMBOLS: dict[MathOperation, str] = {
    MathOperation.ADDITION: "+",
    MathOperation.SUBTRACTION: "-",
    MathOperation.MULTIPLICATION: "×",
    MathOperation.DIVISION: "÷",
}


@dataclass(frozen=True, slots=True)
class DifficultyProfile:
    question_count: int
    max_digits: int
    allowed_operations: tuple[MathOperation, ...]

    @property
    def max_value(self) -> int:
        return 10**self.max_digits - 1


@dataclass(slots=True)
class MathQuestion:
    id: int
    operand1: int
    operand2: int
    operation: MathOperation
    correct_answer: float
    user_answer: float | None = None
    elapsed_seconds: float = 0.0
    percent_difference: float = 0.0
    accuracy_score: float = 0.0
    time_score: float = 0.0
    score: float = 0.0

    @property
    def text(self) -> str:
        return f"{self.operand1} {self.operation.symbol} {self.operand2}"

    @property
    def is_answered(self) -> bool:
        return self.user_answer is not None


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    percent_difference: float
    accuracy_score: float
    time_score: float
    score: float


@dataclass(slots=True)
class GameSession:
    """Single-player game state; advanced one question at a time by its owner."""

    difficulty: Difficulty
    questions: list[MathQuestion] = field(default_factory=list)
    current_question_index: int = 0
    question_started_at: float | None = None

    @property
    def current_question(self) -> MathQuestion | None:
        if self.current_question_index < len(self.questions):
            return self.questions[self.current_question_index]
        return None

    @property
    def is_complete(self) -> bool:
        return self.current_question_index >= len(self.questions)

    @property
    def total_score(self) -> float:
        return sum(question.score for question in self.questions)
