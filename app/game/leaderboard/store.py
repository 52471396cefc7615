from __future__ import annotations

from typing import Protocol

from app.game.arithmetic.types import Difficulty
from app.game.leaderboard.types import LeaderboardEntrySnapshot


class LeaderboardStore(Protocol):
    """Storage capability behind the ranking rules.

    Every list method returns entries ascending by score (ties by
    ``achieved_at`` then ``id``). Returned snapshots are detached copies.
    """

    async def list_user_entries(
        self,
        *,
        difficulty: Difficulty,
        username: str,
    ) -> list[LeaderboardEntrySnapshot]: ...

    async def list_top(self, *, difficulty: Difficulty, limit: int) -> list[LeaderboardEntrySnapshot]: ...

    async def list_all_top(self, *, limit: int) -> list[LeaderboardEntrySnapshot]: ...

    async def count(self, *, difficulty: Difficulty) -> int: ...

    async def get_entry(self, entry_id: str) -> LeaderboardEntrySnapshot | None: ...

    async def create_entry(self, entry: LeaderboardEntrySnapshot) -> LeaderboardEntrySnapshot: ...

    async def delete_entry(self, entry_id: str) -> None: ...

    async def update_rank(self, entry_id: str, rank: int) -> None: ...
