from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.leaderboard_entries import LeaderboardEntry
from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.game.arithmetic.types import Difficulty
from app.game.leaderboard.errors import LeaderboardEntryNotFoundError
from app.game.leaderboard.types import LeaderboardEntrySnapshot


def _parse_entry_id(entry_id: str) -> UUID | None:
    try:
        return UUID(entry_id)
    except ValueError:
        return None


def _snapshot_from_model(entry: LeaderboardEntry) -> LeaderboardEntrySnapshot:
    return LeaderboardEntrySnapshot(
        id=str(entry.id),
        difficulty=Difficulty(entry.difficulty),
        username=entry.username,
        user_id=entry.user_id,
        game_id=entry.game_id,
        score=entry.score,
        achieved_at=entry.achieved_at,
        rank=entry.rank,
    )


class SqlLeaderboardStore:
    """Leaderboard storage on the ``leaderboard_entries`` table.

    Runs inside the caller's transaction; committing is the caller's job.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_user_entries(
        self,
        *,
        difficulty: Difficulty,
        username: str,
    ) -> list[LeaderboardEntrySnapshot]:
        entries = await LeaderboardRepo.list_by_username(
            self._session,
            difficulty=difficulty.value,
            username=username,
        )
        return [_snapshot_from_model(entry) for entry in entries]

    async def list_top(self, *, difficulty: Difficulty, limit: int) -> list[LeaderboardEntrySnapshot]:
        if limit <= 0:
            return []
        entries = await LeaderboardRepo.list_top(self._session, difficulty=difficulty.value, limit=limit)
        return [_snapshot_from_model(entry) for entry in entries]

    async def list_all_top(self, *, limit: int) -> list[LeaderboardEntrySnapshot]:
        if limit <= 0:
            return []
        entries = await LeaderboardRepo.list_top_all(self._session, limit=limit)
        return [_snapshot_from_model(entry) for entry in entries]

    async def count(self, *, difficulty: Difficulty) -> int:
        return await LeaderboardRepo.count_by_difficulty(self._session, difficulty=difficulty.value)

    async def get_entry(self, entry_id: str) -> LeaderboardEntrySnapshot | None:
        parsed = _parse_entry_id(entry_id)
        if parsed is None:
            return None
        entry = await LeaderboardRepo.get_by_id(self._session, parsed)
        if entry is None:
            return None
        return _snapshot_from_model(entry)

    async def create_entry(self, entry: LeaderboardEntrySnapshot) -> LeaderboardEntrySnapshot:
        created = await LeaderboardRepo.create(
            self._session,
            entry=LeaderboardEntry(
                id=UUID(entry.id),
                difficulty=entry.difficulty.value,
                username=entry.username,
                user_id=entry.user_id,
                game_id=entry.game_id,
                score=entry.score,
                achieved_at=entry.achieved_at,
                rank=entry.rank,
            ),
        )
        return _snapshot_from_model(created)

    async def delete_entry(self, entry_id: str) -> None:
        parsed = _parse_entry_id(entry_id)
        deleted = 0 if parsed is None else await LeaderboardRepo.delete_by_id(self._session, parsed)
        if deleted == 0:
            raise LeaderboardEntryNotFoundError(entry_id)

    async def update_rank(self, entry_id: str, rank: int) -> None:
        parsed = _parse_entry_id(entry_id)
        updated = 0 if parsed is None else await LeaderboardRepo.set_rank(
            self._session,
            entry_id=parsed,
            rank=rank,
        )
        if updated == 0:
            raise LeaderboardEntryNotFoundError(entry_id)
