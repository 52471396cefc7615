from __future__ import annotations

from dataclasses import replace

from app.game.arithmetic.types import Difficulty
from app.game.leaderboard.errors import LeaderboardEntryNotFoundError
from app.game.leaderboard.ranking import sort_entries, username_matches
from app.game.leaderboard.types import LeaderboardEntrySnapshot


class InMemoryLeaderboardStore:
    def __init__(self) -> None:
        self._buckets: dict[Difficulty, list[LeaderboardEntrySnapshot]] = {}

    def _bucket(self, difficulty: Difficulty) -> list[LeaderboardEntrySnapshot]:
        return self._buckets.setdefault(difficulty, [])

    def _find(self, entry_id: str) -> tuple[list[LeaderboardEntrySnapshot], LeaderboardEntrySnapshot] | None:
        for bucket in self._buckets.values():
            for entry in bucket:
                if entry.id == entry_id:
                    return bucket, entry
        return None

    async def list_user_entries(
        self,
        *,
        difficulty: Difficulty,
        username: str,
    ) -> list[LeaderboardEntrySnapshot]:
        matches = [entry for entry in self._bucket(difficulty) if username_matches(entry, username)]
        return [replace(entry) for entry in sort_entries(matches)]

    async def list_top(self, *, difficulty: Difficulty, limit: int) -> list[LeaderboardEntrySnapshot]:
        return [replace(entry) for entry in sort_entries(self._bucket(difficulty))[: max(limit, 0)]]

    async def list_all_top(self, *, limit: int) -> list[LeaderboardEntrySnapshot]:
        everything = [entry for bucket in self._buckets.values() for entry in bucket]
        return [replace(entry) for entry in sort_entries(everything)[: max(limit, 0)]]

    async def count(self, *, difficulty: Difficulty) -> int:
        return len(self._bucket(difficulty))

    async def get_entry(self, entry_id: str) -> LeaderboardEntrySnapshot | None:
        found = self._find(entry_id)
        if found is None:
            return None
        return replace(found[1])

    async def create_entry(self, entry: LeaderboardEntrySnapshot) -> LeaderboardEntrySnapshot:
        self._bucket(entry.difficulty).append(replace(entry))
        return replace(entry)

    async def delete_entry(self, entry_id: str) -> None:
        found = self._find(entry_id)
        if found is None:
            raise LeaderboardEntryNotFoundError(entry_id)
        bucket, entry = found
        bucket.remove(entry)

    async def update_rank(self, entry_id: str, rank: int) -> None:
        found = self._find(entry_id)
        if found is None:
            raise LeaderboardEntryNotFoundError(entry_id)
        found[1].rank = rank
