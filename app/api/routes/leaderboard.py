from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from app.api.routes.games_models import LeaderboardEntryResponse, LeaderboardResponse
from app.db.session import SessionLocal
from app.game.arithmetic.errors import UnknownDifficultyError
from app.game.arithmetic.profiles import parse_difficulty
from app.game.leaderboard.constants import DEFAULT_TOP_COUNT
from app.game.leaderboard.types import LeaderboardEntrySnapshot
from app.game.results.service import leaderboard_for_session

router = APIRouter(tags=["leaderboard"])


def _entry_response(entry: LeaderboardEntrySnapshot) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        id=entry.id,
        difficulty=entry.difficulty.value,
        username=entry.username,
        user_id=entry.user_id,
        game_id=entry.game_id,
        score=entry.score,
        achieved_at=entry.achieved_at,
        rank=entry.rank,
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_global_leaderboard(
    top: int = Query(default=DEFAULT_TOP_COUNT, ge=1, le=100),
) -> LeaderboardResponse:
    async with SessionLocal() as session:
        entries = await leaderboard_for_session(session).get_global_leaderboard(top)
    return LeaderboardResponse(entries=[_entry_response(entry) for entry in entries])


@router.get("/leaderboard/{difficulty}", response_model=LeaderboardResponse)
async def get_leaderboard(
    difficulty: str,
    top: int = Query(default=DEFAULT_TOP_COUNT, ge=1, le=100),
) -> LeaderboardResponse:
    try:
        resolved = parse_difficulty(difficulty)
    except UnknownDifficultyError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_UNKNOWN_DIFFICULTY"}) from exc

    async with SessionLocal() as session:
        entries = await leaderboard_for_session(session).get_leaderboard(resolved, top)
    return LeaderboardResponse(
        difficulty=resolved.value,
        entries=[_entry_response(entry) for entry in entries],
    )
