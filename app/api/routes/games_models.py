from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateGameRequest(BaseModel):
    difficulty: str = Field(default="Expert", min_length=1, max_length=16)


class QuestionResponse(BaseModel):
    id: int = Field(ge=1)
    operand1: int
    operand2: int
    operation: str
    correct_answer: float
    question_text: str


class CreateGameResponse(BaseModel):
    game_id: str
    difficulty: str
    questions: list[QuestionResponse]


class QuestionResultPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: int = Field(ge=1)
    operand1: int
    operand2: int
    operation: str
    correct_answer: float
    user_answer: float | None = None
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
    percent_difference: float = Field(default=0.0, ge=0.0)
    accuracy_score: float = Field(default=0.0, ge=0.0)
    time_score: float = Field(default=0.0, ge=0.0)
    score: float = Field(default=0.0, ge=0.0)


class GameResultsRequest(BaseModel):
    game_id: str = Field(min_length=1, max_length=64)
    username: str = Field(min_length=1, max_length=64)
    difficulty: str = Field(min_length=1, max_length=16)
    questions: list[QuestionResultPayload] = Field(default_factory=list)
    analysis: str | None = None


class GameResultsResponse(BaseModel):
    game_id: str
    total_score: float
    added_to_leaderboard: bool
    leaderboard_rank: int | None = None


class GameRecordResponse(BaseModel):
    game_id: str
    player_id: UUID
    username: str
    difficulty: str
    total_score: float
    completed_at: datetime
    analysis: str | None = None
    questions: list[QuestionResultPayload]


class GameAnalysisRequest(BaseModel):
    analysis: str = Field(min_length=1)


class GameAnalysisResponse(BaseModel):
    game_id: str
    updated: bool


class RegisterPlayerRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)


class PlayerResponse(BaseModel):
    player_id: UUID
    username: str
    games_played: int = Field(ge=0)
    total_score: float
    best_score: float
    created_at: datetime
    last_played_at: datetime | None = None


class LeaderboardEntryResponse(BaseModel):
    id: str
    difficulty: str
    username: str
    user_id: str
    game_id: str
    score: float
    achieved_at: datetime
    rank: int = Field(ge=1)


class LeaderboardResponse(BaseModel):
    difficulty: str | None = None
    entries: list[LeaderboardEntryResponse]
