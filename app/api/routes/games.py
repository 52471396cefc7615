from __future__ import annotations

import random
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, HTTPException

from app.api.routes.games_models import (
    CreateGameRequest,
    CreateGameResponse,
    GameAnalysisRequest,
    GameAnalysisResponse,
    GameRecordResponse,
    GameResultsRequest,
    GameResultsResponse,
    PlayerResponse,
    QuestionResponse,
    QuestionResultPayload,
    RegisterPlayerRequest,
)
from app.db.session import SessionLocal
from app.game.arithmetic.errors import UnknownDifficultyError
from app.game.arithmetic.generator import generate_game
from app.game.arithmetic.profiles import parse_difficulty
from app.game.arithmetic.types import Difficulty, MathOperation, MathQuestion
from app.game.results.errors import GameAlreadyRecordedError, PlayerNotFoundError
from app.game.results.service import GameResultsService
from app.game.results.types import PlayerSnapshot

router = APIRouter(tags=["games"])

_rng = random.SystemRandom()


def _resolve_difficulty(value: str) -> Difficulty:
    try:
        return parse_difficulty(value)
    except UnknownDifficultyError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_UNKNOWN_DIFFICULTY"}) from exc


def _question_from_payload(payload: QuestionResultPayload) -> MathQuestion:
    try:
        operation = MathOperation(payload.operation)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_UNKNOWN_OPERATION"}) from exc
    return MathQuestion(
        id=payload.id,
        operand1=payload.operand1,
        operand2=payload.operand2,
        operation=operation,
        correct_answer=payload.correct_answer,
        user_answer=payload.user_answer,
        elapsed_seconds=payload.elapsed_seconds,
        percent_difference=payload.percent_difference,
        accuracy_score=payload.accuracy_score,
        time_score=payload.time_score,
        score=payload.score,
    )


def _player_response(player: PlayerSnapshot) -> PlayerResponse:
    return PlayerResponse(
        player_id=player.player_id,
        username=player.username,
        games_played=player.games_played,
        total_score=player.total_score,
        best_score=player.best_score,
        created_at=player.created_at,
        last_played_at=player.last_played_at,
    )


@router.post("/games", response_model=CreateGameResponse)
async def create_game(payload: CreateGameRequest) -> CreateGameResponse:
    difficulty = _resolve_difficulty(payload.difficulty)
    questions = generate_game(difficulty, _rng)
    return CreateGameResponse(
        game_id=str(uuid4()),
        difficulty=difficulty.value,
        questions=[
            QuestionResponse(
                id=question.id,
                operand1=question.operand1,
                operand2=question.operand2,
                operation=question.operation.value,
                correct_answer=question.correct_answer,
                question_text=question.text,
            )
            for question in questions
        ],
    )


@router.post("/players", response_model=PlayerResponse)
async def register_player(payload: RegisterPlayerRequest) -> PlayerResponse:
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        player = await GameResultsService.register_player(
            session,
            username=payload.username,
            now_utc=now_utc,
        )
    return _player_response(player)


@router.post("/games/results", response_model=GameResultsResponse)
async def submit_game_results(payload: GameResultsRequest) -> GameResultsResponse:
    difficulty = _resolve_difficulty(payload.difficulty)
    questions = [_question_from_payload(item) for item in payload.questions]

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            summary = await GameResultsService.submit_game_results(
                session,
                game_id=payload.game_id,
                username=payload.username,
                difficulty=difficulty,
                questions=questions,
                analysis=payload.analysis,
                now_utc=now_utc,
            )
    except PlayerNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PLAYER_NOT_FOUND"}) from exc
    except GameAlreadyRecordedError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_GAME_ALREADY_RECORDED"}) from exc

    return GameResultsResponse(
        game_id=summary.game_id,
        total_score=summary.total_score,
        added_to_leaderboard=summary.added_to_leaderboard,
        leaderboard_rank=summary.leaderboard_rank,
    )


@router.get("/games/{game_id}", response_model=GameRecordResponse)
async def get_game(game_id: str) -> GameRecordResponse:
    async with SessionLocal() as session:
        record = await GameResultsService.get_game(session, game_id=game_id)
    if record is None:
        raise HTTPException(status_code=404, detail={"code": "E_GAME_NOT_FOUND"})

    return GameRecordResponse(
        game_id=record.game_id,
        player_id=record.player_id,
        username=record.username,
        difficulty=record.difficulty.value,
        total_score=record.total_score,
        completed_at=record.completed_at,
        analysis=record.analysis,
        questions=[
            QuestionResultPayload(
                id=question.id,
                operand1=question.operand1,
                operand2=question.operand2,
                operation=question.operation.value,
                correct_answer=question.correct_answer,
                user_answer=question.user_answer,
                elapsed_seconds=question.elapsed_seconds,
                percent_difference=question.percent_difference,
                accuracy_score=question.accuracy_score,
                time_score=question.time_score,
                score=question.score,
            )
            for question in record.questions
        ],
    )


@router.put("/games/{game_id}/analysis", response_model=GameAnalysisResponse)
async def update_game_analysis(game_id: str, payload: GameAnalysisRequest) -> GameAnalysisResponse:
    async with SessionLocal.begin() as session:
        updated = await GameResultsService.update_game_analysis(
            session,
            game_id=game_id,
            analysis=payload.analysis,
        )
    return GameAnalysisResponse(game_id=game_id, updated=updated)
