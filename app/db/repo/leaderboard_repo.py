from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.leaderboard_entries import LeaderboardEntry

_ORDERING = (
    LeaderboardEntry.score.asc(),
    LeaderboardEntry.achieved_at.asc(),
    LeaderboardEntry.id.asc(),
)


class LeaderboardRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, entry_id: UUID) -> LeaderboardEntry | None:
        return await session.get(LeaderboardEntry, entry_id)

    @staticmethod
    async def list_by_username(
        session: AsyncSession,
        *,
        difficulty: str,
        username: str,
    ) -> list[LeaderboardEntry]:
        stmt = (
            select(LeaderboardEntry)
            .where(
                LeaderboardEntry.difficulty == difficulty,
                func.lower(LeaderboardEntry.username) == username.lower(),
            )
            .order_by(*_ORDERING)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_top(session: AsyncSession, *, difficulty: str, limit: int) -> list[LeaderboardEntry]:
        stmt = (
            select(LeaderboardEntry)
            .where(LeaderboardEntry.difficulty == difficulty)
            .order_by(*_ORDERING)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_top_all(session: AsyncSession, *, limit: int) -> list[LeaderboardEntry]:
        stmt = select(LeaderboardEntry).order_by(*_ORDERING).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_by_difficulty(session: AsyncSession, *, difficulty: str) -> int:
        stmt = select(func.count(LeaderboardEntry.id)).where(LeaderboardEntry.difficulty == difficulty)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    async def create(session: AsyncSession, *, entry: LeaderboardEntry) -> LeaderboardEntry:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def delete_by_id(session: AsyncSession, entry_id: UUID) -> int:
        stmt = delete(LeaderboardEntry).where(LeaderboardEntry.id == entry_id)
        result = await session.execute(stmt)
        return int(result.rowcount or 0)

    @staticmethod
    async def set_rank(session: AsyncSession, *, entry_id: UUID, rank: int) -> int:
        stmt = update(LeaderboardEntry).where(LeaderboardEntry.id == entry_id).values(rank=rank)
        result = await session.execute(stmt)
        return int(result.rowcount or 0)
