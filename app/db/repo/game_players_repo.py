from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_players import GamePlayer


class GamePlayersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, player_id: UUID) -> GamePlayer | None:
        return await session.get(GamePlayer, player_id)

    @staticmethod
    async def get_by_username(session: AsyncSession, username: str) -> GamePlayer | None:
        stmt = select(GamePlayer).where(func.lower(GamePlayer.username) == username.lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username_for_update(session: AsyncSession, username: str) -> GamePlayer | None:
        stmt = (
            select(GamePlayer)
            .where(func.lower(GamePlayer.username) == username.lower())
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(session: AsyncSession, *, username: str, now_utc: datetime) -> GamePlayer:
        player = GamePlayer(
            id=uuid4(),
            username=username,
            games_played=0,
            total_score=0.0,
            best_score=0.0,
            created_at=now_utc,
            last_played_at=None,
        )
        session.add(player)
        await session.flush()
        return player
