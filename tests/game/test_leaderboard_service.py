from __future__ import annotations

import asyncio
import random
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from app.game.arithmetic.types import Difficulty
from app.game.leaderboard.memory_store import InMemoryLeaderboardStore
from app.game.leaderboard.service import LeaderboardService
from app.game.leaderboard.types import LeaderboardEntrySnapshot

UTC = timezone.utc
BASE_TIME = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)


class RecordingStore(InMemoryLeaderboardStore):
    def __init__(self) -> None:
        super().__init__()
        self.rank_updates: list[tuple[str, int]] = []

    async def update_rank(self, entry_id: str, rank: int) -> None:
        self.rank_updates.append((entry_id, rank))
        await super().update_rank(entry_id, rank)


class BrokenStore(InMemoryLeaderboardStore):
    async def list_top(self, *, difficulty: Difficulty, limit: int) -> list[LeaderboardEntrySnapshot]:
        raise RuntimeError("storage unavailable")


async def _add(
    service: LeaderboardService,
    *,
    username: str,
    score: float,
    difficulty: Difficulty = Difficulty.EXPERT,
    minute: int = 0,
) -> LeaderboardEntrySnapshot | None:
    return await service.add_entry(
        user_id=f"id-{username.lower()}",
        username=username,
        game_id=f"game-{username}-{score}",
        difficulty=difficulty,
        score=score,
        now_utc=BASE_TIME + timedelta(minutes=minute),
    )


async def _scores(service: LeaderboardService, difficulty: Difficulty = Difficulty.EXPERT) -> list[float]:
    return [entry.score for entry in await service.get_leaderboard(difficulty, 50)]


@pytest.mark.asyncio
async def test_first_entry_is_admitted_with_rank_one() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())

    entry = await _add(service, username="TestUser", score=50.0)

    assert entry is not None
    assert entry.username == "TestUser"
    assert entry.score == 50.0
    assert entry.difficulty is Difficulty.EXPERT
    assert entry.rank == 1


@pytest.mark.asyncio
async def test_fourth_entry_must_beat_personal_worst() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    for minute, score in enumerate((30.0, 40.0, 50.0)):
        assert await _add(service, username="Alice", score=score, minute=minute) is not None

    rejected = await _add(service, username="Alice", score=60.0, minute=5)
    assert rejected is None
    assert await _scores(service) == [30.0, 40.0, 50.0]

    accepted = await _add(service, username="Alice", score=35.0, minute=6)
    assert accepted is not None
    assert accepted.rank == 2
    assert await _scores(service) == [30.0, 35.0, 40.0]


@pytest.mark.asyncio
async def test_tie_with_personal_worst_is_rejected() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    for score in (30.0, 40.0, 50.0):
        await _add(service, username="Alice", score=score)

    assert await _add(service, username="Alice", score=50.0) is None
    assert await _scores(service) == [30.0, 40.0, 50.0]


@pytest.mark.asyncio
async def test_personal_cap_ignores_username_case() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    await _add(service, username="alice", score=30.0)
    await _add(service, username="ALICE", score=40.0)
    await _add(service, username="Alice", score=50.0)

    assert await _add(service, username="aLiCe", score=55.0) is None
    assert await _add(service, username="AlIcE", score=45.0) is not None

    entries = await service.get_leaderboard(Difficulty.EXPERT)
    assert [entry.score for entry in entries] == [30.0, 40.0, 45.0]


@pytest.mark.asyncio
async def test_full_bucket_rejects_score_not_better_than_cutoff() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    for index in range(10):
        await _add(service, username=f"player{index}", score=10.0 * (index + 1), minute=index)
    before = await service.get_leaderboard(Difficulty.EXPERT)

    assert await _add(service, username="late", score=150.0) is None
    assert await _add(service, username="tied", score=100.0) is None

    assert await service.get_leaderboard(Difficulty.EXPERT) == before


@pytest.mark.asyncio
async def test_full_bucket_admits_better_score_and_evicts_worst() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    for index in range(10):
        await _add(service, username=f"player{index}", score=10.0 * (index + 1), minute=index)

    entry = await _add(service, username="champion", score=5.0, minute=20)

    assert entry is not None
    assert entry.rank == 1
    scores = await _scores(service)
    assert len(scores) == 10
    assert scores[0] == 5.0
    assert 100.0 not in scores


@pytest.mark.asyncio
async def test_buckets_are_scoped_by_difficulty() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    for score in (30.0, 40.0, 50.0):
        await _add(service, username="Alice", score=score, difficulty=Difficulty.EXPERT)

    entry = await _add(service, username="Alice", score=90.0, difficulty=Difficulty.BEGINNER)

    assert entry is not None
    assert await _scores(service, Difficulty.BEGINNER) == [90.0]
    assert await _scores(service, Difficulty.EXPERT) == [30.0, 40.0, 50.0]


@pytest.mark.asyncio
async def test_global_leaderboard_ranks_across_buckets() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())
    await _add(service, username="a", score=70.0, difficulty=Difficulty.BEGINNER)
    await _add(service, username="b", score=20.0, difficulty=Difficulty.EXPERT)
    await _add(service, username="c", score=45.0, difficulty=Difficulty.NOVICE)
    await _add(service, username="d", score=33.0, difficulty=Difficulty.INTERMEDIATE)

    entries = await service.get_global_leaderboard(3)

    assert [entry.username for entry in entries] == ["b", "d", "c"]
    assert [entry.rank for entry in entries] == [1, 2, 3]


@pytest.mark.asyncio
async def test_get_leaderboard_assigns_positional_ranks() -> None:
    store = InMemoryLeaderboardStore()
    for index, score in enumerate((12.0, 8.0, 15.0, 8.0)):
        await store.create_entry(
            LeaderboardEntrySnapshot(
                id=f"e{index}",
                difficulty=Difficulty.NOVICE,
                username=f"u{index}",
                user_id=f"u{index}",
                game_id=f"g{index}",
                score=score,
                achieved_at=BASE_TIME + timedelta(minutes=index),
                rank=7,
            )
        )
    service = LeaderboardService(store)

    entries = await service.get_leaderboard("Novice", 3)

    assert [entry.id for entry in entries] == ["e1", "e3", "e0"]
    assert [entry.rank for entry in entries] == [1, 2, 3]
    stored = await store.get_entry("e1")
    assert stored is not None
    assert stored.rank == 7


@pytest.mark.asyncio
async def test_recompute_ranks_writes_only_changed_ranks() -> None:
    store = RecordingStore()
    for index, (score, rank) in enumerate(((10.0, 1), (20.0, 5), (30.0, 3))):
        await store.create_entry(
            LeaderboardEntrySnapshot(
                id=f"e{index}",
                difficulty=Difficulty.EXPERT,
                username=f"u{index}",
                user_id=f"u{index}",
                game_id=f"g{index}",
                score=score,
                achieved_at=BASE_TIME,
                rank=rank,
            )
        )
    service = LeaderboardService(store)

    await service.recompute_ranks(Difficulty.EXPERT)

    assert store.rank_updates == [("e1", 2)]
    await service.recompute_ranks(Difficulty.EXPERT)
    assert store.rank_updates == [("e1", 2)]
    stored = [await store.get_entry(f"e{index}") for index in range(3)]
    assert [entry.rank for entry in stored if entry is not None] == [1, 2, 3]


@pytest.mark.asyncio
async def test_add_entry_persists_contiguous_ranks() -> None:
    store = InMemoryLeaderboardStore()
    service = LeaderboardService(store)
    for minute, (username, score) in enumerate((("a", 40.0), ("b", 20.0), ("c", 30.0), ("d", 10.0))):
        await _add(service, username=username, score=score, minute=minute)

    stored = await store.list_top(difficulty=Difficulty.EXPERT, limit=10)

    assert [entry.username for entry in stored] == ["d", "b", "c", "a"]
    assert [entry.rank for entry in stored] == [1, 2, 3, 4]


@pytest.mark.asyncio
async def test_random_admissions_respect_caps() -> None:
    rng = random.Random(11)
    service = LeaderboardService(InMemoryLeaderboardStore())
    usernames = ["ann", "Ann", "bob", "cy", "dee", "eve", "fay", "gus"]

    for minute in range(250):
        await _add(
            service,
            username=rng.choice(usernames),
            score=round(rng.uniform(10, 500), 1),
            minute=minute,
        )

        entries = await service.get_leaderboard(Difficulty.EXPERT, 100)
        assert len(entries) <= 10
        per_user = Counter(entry.username.lower() for entry in entries)
        assert max(per_user.values()) <= 3
        assert [entry.rank for entry in entries] == list(range(1, len(entries) + 1))


@pytest.mark.asyncio
async def test_concurrent_admissions_keep_caps() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())

    await asyncio.gather(
        *[
            _add(service, username=f"user{index % 6}", score=float(100 - index), minute=index)
            for index in range(40)
        ]
    )

    entries = await service.get_leaderboard(Difficulty.EXPERT, 100)
    assert len(entries) == 10
    assert max(Counter(entry.username for entry in entries).values()) <= 3


@pytest.mark.asyncio
async def test_storage_errors_propagate() -> None:
    service = LeaderboardService(BrokenStore())

    with pytest.raises(RuntimeError, match="storage unavailable"):
        await _add(service, username="Alice", score=10.0)


@pytest.mark.asyncio
async def test_get_entry_returns_none_when_missing() -> None:
    service = LeaderboardService(InMemoryLeaderboardStore())

    assert await service.get_entry("missing") is None


class CountingStore(InMemoryLeaderboardStore):
    def __init__(self) -> None:
        super().__init__()
        self.count_calls: list[Difficulty] = []

    async def count(self, *, difficulty: Difficulty) -> int:
        self.count_calls.append(difficulty)
        return await super().count(difficulty=difficulty)


def _stored_entry(username: str, score: float, minute: int) -> LeaderboardEntrySnapshot:
    return LeaderboardEntrySnapshot(
        id=f"seed-{username}-{minute}",
        difficulty=Difficulty.EXPERT,
        username=username,
        user_id=f"id-{username.lower()}",
        game_id=f"game-seed-{minute}",
        score=score,
        achieved_at=BASE_TIME + timedelta(minutes=minute),
    )


@pytest.mark.asyncio
async def test_store_count_is_scoped_by_difficulty() -> None:
    store = InMemoryLeaderboardStore()
    service = LeaderboardService(store)
    await _add(service, username="Alice", score=10.0)
    await _add(service, username="Bob", score=12.0)
    await _add(service, username="Cara", score=9.0, difficulty=Difficulty.NOVICE)

    assert await store.count(difficulty=Difficulty.EXPERT) == 2
    assert await store.count(difficulty=Difficulty.NOVICE) == 1
    assert await store.count(difficulty=Difficulty.BEGINNER) == 0


@pytest.mark.asyncio
async def test_cutoff_check_uses_bucket_count() -> None:
    store = CountingStore()
    service = LeaderboardService(store, size=2)
    await _add(service, username="Alice", score=10.0)
    await _add(service, username="Bob", score=20.0)

    rejected = await _add(service, username="Cara", score=20.0, minute=2)
    admitted = await _add(service, username="Dan", score=15.0, minute=3)

    assert rejected is None
    assert admitted is not None
    assert admitted.rank == 2
    assert store.count_calls == [Difficulty.EXPERT] * 4
    assert await _scores(service) == [10.0, 15.0]


@pytest.mark.asyncio
async def test_admission_trims_user_surplus_back_to_cap() -> None:
    store = InMemoryLeaderboardStore()
    for minute, score in enumerate([30.0, 40.0, 50.0, 60.0, 70.0]):
        await store.create_entry(_stored_entry("Alice", score, minute))
    service = LeaderboardService(store)

    entry = await _add(service, username="alice", score=35.0, minute=10)

    assert entry is not None
    user_scores = [e.score for e in await store.list_user_entries(difficulty=Difficulty.EXPERT, username="ALICE")]
    assert user_scores == [30.0, 35.0, 40.0]


@pytest.mark.asyncio
async def test_rejected_entry_still_trims_user_surplus() -> None:
    store = InMemoryLeaderboardStore()
    for minute, score in enumerate([30.0, 40.0, 50.0, 60.0]):
        await store.create_entry(_stored_entry("Alice", score, minute))
    service = LeaderboardService(store)

    entry = await _add(service, username="Alice", score=55.0, minute=10)

    assert entry is None
    user_scores = [e.score for e in await store.list_user_entries(difficulty=Difficulty.EXPERT, username="Alice")]
    assert user_scores == [30.0, 40.0, 50.0]
