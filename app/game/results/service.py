from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_players import GamePlayer
from app.db.models.game_records import GameRecord
from app.db.repo.game_players_repo import GamePlayersRepo
from app.db.repo.game_records_repo import GameRecordsRepo
from app.game.arithmetic.profiles import parse_difficulty
from app.game.arithmetic.rounding import round_one_decimal
from app.game.arithmetic.types import Difficulty, MathOperation, MathQuestion
from app.game.leaderboard.service import LeaderboardService
from app.game.leaderboard.sql_store import SqlLeaderboardStore
from app.game.results.errors import GameAlreadyRecordedError, PlayerNotFoundError
from app.game.results.types import GameRecordSnapshot, GameResultsSummary, PlayerSnapshot

logger = structlog.get_logger(__name__)

# Shared by every per-request LeaderboardService in this process.
_LEADERBOARD_BUCKET_LOCKS: dict[Difficulty, asyncio.Lock] = {}


def leaderboard_for_session(session: AsyncSession) -> LeaderboardService:
    return LeaderboardService(SqlLeaderboardStore(session), bucket_locks=_LEADERBOARD_BUCKET_LOCKS)


def _question_to_payload(question: MathQuestion) -> dict[str, Any]:
    return {
        "id": question.id,
        "operand1": question.operand1,
        "operand2": question.operand2,
        "operation": question.operation.value,
        "correct_answer": question.correct_answer,
        "user_answer": question.user_answer,
        "elapsed_seconds": question.elapsed_seconds,
        "percent_difference": question.percent_difference,
        "accuracy_score": question.accuracy_score,
        "time_score": question.time_score,
        "score": question.score,
    }


def _question_from_payload(payload: dict[str, Any]) -> MathQuestion:
    return MathQuestion(
        id=int(payload["id"]),
        operand1=int(payload["operand1"]),
        operand2=int(payload["operand2"]),
        operation=MathOperation(payload["operation"]),
        correct_answer=float(payload["correct_answer"]),
        user_answer=payload.get("user_answer"),
        elapsed_seconds=float(payload.get("elapsed_seconds", 0.0)),
        percent_difference=float(payload.get("percent_difference", 0.0)),
        accuracy_score=float(payload.get("accuracy_score", 0.0)),
        time_score=float(payload.get("time_score", 0.0)),
        score=float(payload.get("score", 0.0)),
    )


def _player_snapshot(player: GamePlayer) -> PlayerSnapshot:
    return PlayerSnapshot(
        player_id=player.id,
        username=player.username,
        games_played=player.games_played,
        total_score=player.total_score,
        best_score=player.best_score,
        created_at=player.created_at,
        last_played_at=player.last_played_at,
    )


def _record_snapshot(record: GameRecord) -> GameRecordSnapshot:
    return GameRecordSnapshot(
        game_id=record.id,
        player_id=record.player_id,
        username=record.username,
        difficulty=Difficulty(record.difficulty),
        total_score=record.total_score,
        completed_at=record.completed_at,
        analysis=record.analysis,
        questions=tuple(_question_from_payload(item) for item in record.questions),
    )


def apply_game_to_player_stats(player: GamePlayer, *, total_score: float, now_utc: datetime) -> None:
    player.games_played += 1
    player.total_score = round_one_decimal(player.total_score + total_score)
    # best_score 0 means "no game yet", lower totals are better.
    if player.best_score == 0 or total_score < player.best_score:
        player.best_score = total_score
    player.last_played_at = now_utc


class GameResultsService:
    @staticmethod
    async def register_player(session: AsyncSession, *, username: str, now_utc: datetime) -> PlayerSnapshot:
        existing = await GamePlayersRepo.get_by_username(session, username)
        if existing is not None:
            return _player_snapshot(existing)

        player = await GamePlayersRepo.create(session, username=username.strip(), now_utc=now_utc)
        logger.info("game_player_registered", player_id=str(player.id), username=player.username)
        return _player_snapshot(player)

    @staticmethod
    async def get_player(session: AsyncSession, *, username: str) -> PlayerSnapshot | None:
        player = await GamePlayersRepo.get_by_username(session, username)
        if player is None:
            return None
        return _player_snapshot(player)

    @staticmethod
    async def submit_game_results(
        session: AsyncSession,
        *,
        game_id: str,
        username: str,
        difficulty: Difficulty | str,
        questions: Sequence[MathQuestion],
        now_utc: datetime,
        analysis: str | None = None,
    ) -> GameResultsSummary:
        resolved = parse_difficulty(difficulty)
        player = await GamePlayersRepo.get_by_username_for_update(session, username)
        if player is None:
            raise PlayerNotFoundError(username)

        if await GameRecordsRepo.get_by_id(session, game_id) is not None:
            raise GameAlreadyRecordedError(game_id)

        total_score = round_one_decimal(sum(question.score for question in questions))
        await GameRecordsRepo.create(
            session,
            record=GameRecord(
                id=game_id,
                player_id=player.id,
                username=player.username,
                difficulty=resolved.value,
                total_score=total_score,
                completed_at=now_utc,
                analysis=analysis,
                questions=[_question_to_payload(question) for question in questions],
            ),
        )
        apply_game_to_player_stats(player, total_score=total_score, now_utc=now_utc)
        await session.flush()

        leaderboard = leaderboard_for_session(session)
        entry = await leaderboard.add_entry(
            user_id=str(player.id),
            username=player.username,
            game_id=game_id,
            difficulty=resolved,
            score=total_score,
            now_utc=now_utc,
        )
        await leaderboard.recompute_ranks(resolved)

        logger.info(
            "game_results_submitted",
            game_id=game_id,
            player_id=str(player.id),
            difficulty=resolved.value,
            total_score=total_score,
            added_to_leaderboard=entry is not None,
        )
        return GameResultsSummary(
            game_id=game_id,
            total_score=total_score,
            added_to_leaderboard=entry is not None,
            leaderboard_rank=entry.rank if entry is not None else None,
        )

    @staticmethod
    async def get_game(session: AsyncSession, *, game_id: str) -> GameRecordSnapshot | None:
        record = await GameRecordsRepo.get_by_id(session, game_id)
        if record is None:
            return None
        return _record_snapshot(record)

    @staticmethod
    async def update_game_analysis(session: AsyncSession, *, game_id: str, analysis: str) -> bool:
        updated = await GameRecordsRepo.set_analysis(session, game_id=game_id, analysis=analysis)
        if not updated:
            logger.warning("game_analysis_update_missed", game_id=game_id)
        return updated
