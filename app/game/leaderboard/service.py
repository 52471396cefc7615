from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from uuid import uuid4

import structlog

from app.game.arithmetic.profiles import parse_difficulty
from app.game.arithmetic.types import Difficulty
from app.game.leaderboard.constants import DEFAULT_TOP_COUNT, LEADERBOARD_SIZE, MAX_ENTRIES_PER_USER
from app.game.leaderboard.ranking import rank_changes, with_positional_ranks
from app.game.leaderboard.store import LeaderboardStore
from app.game.leaderboard.types import LeaderboardEntrySnapshot

logger = structlog.get_logger(__name__)


class LeaderboardService:
    """Capped per-difficulty leaderboard with a per-user entry limit.

    Admission is compare-and-evict against the store. Calls for the same
    difficulty are serialized inside this process; separate processes sharing
    one store can still interleave and are corrected by later evictions.
    """

    def __init__(
        self,
        store: LeaderboardStore,
        *,
        size: int = LEADERBOARD_SIZE,
        max_entries_per_user: int = MAX_ENTRIES_PER_USER,
        bucket_locks: dict[Difficulty, asyncio.Lock] | None = None,
    ) -> None:
        self._store = store
        self._size = size
        self._max_entries_per_user = max_entries_per_user
        self._bucket_locks = bucket_locks if bucket_locks is not None else {}

    def _lock_for(self, difficulty: Difficulty) -> asyncio.Lock:
        lock = self._bucket_locks.get(difficulty)
        if lock is None:
            lock = asyncio.Lock()
            self._bucket_locks[difficulty] = lock
        return lock

    async def add_entry(
        self,
        *,
        user_id: str,
        username: str,
        game_id: str,
        difficulty: Difficulty | str,
        score: float,
        now_utc: datetime | None = None,
    ) -> LeaderboardEntrySnapshot | None:
        resolved = parse_difficulty(difficulty)
        async with self._lock_for(resolved):
            if not await self._free_personal_slot(difficulty=resolved, username=username, score=score):
                logger.info(
                    "leaderboard_entry_rejected",
                    reason="personal_best_not_improved",
                    difficulty=resolved.value,
                    username=username,
                    score=score,
                )
                return None

            cutoff = await self._cutoff_entry(resolved)
            if cutoff is not None and score >= cutoff.score:
                logger.info(
                    "leaderboard_entry_rejected",
                    reason="below_cutoff",
                    difficulty=resolved.value,
                    username=username,
                    score=score,
                    cutoff_score=cutoff.score,
                )
                return None

            created = await self._store.create_entry(
                LeaderboardEntrySnapshot(
                    id=str(uuid4()),
                    difficulty=resolved,
                    username=username,
                    user_id=user_id,
                    game_id=game_id,
                    score=score,
                    achieved_at=now_utc or datetime.now(timezone.utc),
                    rank=1,
                )
            )
            await self._evict_overflow(resolved)
            changed = await self._recompute_ranks_locked(resolved)
            for entry_id, rank in changed:
                if entry_id == created.id:
                    created.rank = rank

            logger.info(
                "leaderboard_entry_added",
                difficulty=resolved.value,
                username=username,
                entry_id=created.id,
                score=score,
                rank=created.rank,
            )
            return created

    async def _cutoff_entry(self, difficulty: Difficulty) -> LeaderboardEntrySnapshot | None:
        """Worst entry of a full bucket, or None while there is room."""
        if await self._store.count(difficulty=difficulty) < self._size:
            return None
        current_top = await self._store.list_top(difficulty=difficulty, limit=self._size)
        return current_top[-1] if current_top else None

    async def _free_personal_slot(self, *, difficulty: Difficulty, username: str, score: float) -> bool:
        user_entries = await self._store.list_user_entries(difficulty=difficulty, username=username)
        # Entries past the cap can only come from interleaved writers.
        for surplus in user_entries[self._max_entries_per_user :]:
            await self._store.delete_entry(surplus.id)
            logger.info(
                "leaderboard_personal_surplus_trimmed",
                difficulty=difficulty.value,
                username=username,
                evicted_entry_id=surplus.id,
                evicted_score=surplus.score,
            )
        kept = user_entries[: self._max_entries_per_user]
        if len(kept) < self._max_entries_per_user:
            return True

        worst = kept[-1]
        if score >= worst.score:
            return False

        await self._store.delete_entry(worst.id)
        logger.info(
            "leaderboard_personal_entry_replaced",
            difficulty=difficulty.value,
            username=username,
            evicted_entry_id=worst.id,
            evicted_score=worst.score,
        )
        return True

    async def _evict_overflow(self, difficulty: Difficulty) -> None:
        ranked = await self._store.list_top(difficulty=difficulty, limit=self._size + 1)
        if len(ranked) <= self._size:
            return
        worst = ranked[-1]
        await self._store.delete_entry(worst.id)
        logger.info(
            "leaderboard_entry_evicted",
            difficulty=difficulty.value,
            entry_id=worst.id,
            score=worst.score,
        )

    async def _recompute_ranks_locked(self, difficulty: Difficulty) -> list[tuple[str, int]]:
        top = await self._store.list_top(difficulty=difficulty, limit=self._size)
        changed = rank_changes(top)
        for entry_id, rank in changed:
            await self._store.update_rank(entry_id, rank)
        return changed

    async def recompute_ranks(self, difficulty: Difficulty | str) -> None:
        resolved = parse_difficulty(difficulty)
        async with self._lock_for(resolved):
            changed = await self._recompute_ranks_locked(resolved)
        logger.debug("leaderboard_ranks_recomputed", difficulty=resolved.value, changed=len(changed))

    async def get_leaderboard(
        self,
        difficulty: Difficulty | str,
        top_count: int = DEFAULT_TOP_COUNT,
    ) -> list[LeaderboardEntrySnapshot]:
        resolved = parse_difficulty(difficulty)
        entries = await self._store.list_top(difficulty=resolved, limit=top_count)
        return with_positional_ranks(entries)

    async def get_global_leaderboard(self, top_count: int = DEFAULT_TOP_COUNT) -> list[LeaderboardEntrySnapshot]:
        entries = await self._store.list_all_top(limit=top_count)
        return with_positional_ranks(entries)

    async def get_entry(self, entry_id: str) -> LeaderboardEntrySnapshot | None:
        return await self._store.get_entry(entry_id)
