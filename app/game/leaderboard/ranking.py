from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from app.game.leaderboard.types import LeaderboardEntrySnapshot


def entry_sort_key(entry: LeaderboardEntrySnapshot) -> tuple[object, ...]:
    return (entry.score, entry.achieved_at, entry.id)


def sort_entries(entries: Iterable[LeaderboardEntrySnapshot]) -> list[LeaderboardEntrySnapshot]:
    return sorted(entries, key=entry_sort_key)


def with_positional_ranks(
    entries: Iterable[LeaderboardEntrySnapshot],
) -> list[LeaderboardEntrySnapshot]:
    """Return copies ranked 1..k by position; stored ranks are not trusted."""
    return [replace(entry, rank=position) for position, entry in enumerate(entries, start=1)]


def rank_changes(entries: Iterable[LeaderboardEntrySnapshot]) -> list[tuple[str, int]]:
    return [
        (entry.id, position)
        for position, entry in enumerate(entries, start=1)
        if entry.rank != position
    ]


def username_matches(entry: LeaderboardEntrySnapshot, username: str) -> bool:
    return entry.username.casefold() == username.casefold()
