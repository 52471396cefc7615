from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_records import GameRecord


class GameRecordsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, game_id: str) -> GameRecord | None:
        return await session.get(GameRecord, game_id)

    @staticmethod
    async def create(session: AsyncSession, *, record: GameRecord) -> GameRecord:
        session.add(record)
        await session.flush()
        return record

    @staticmethod
    async def set_analysis(session: AsyncSession, *, game_id: str, analysis: str) -> bool:
        stmt = update(GameRecord).where(GameRecord.id == game_id).values(analysis=analysis)
        result = await session.execute(stmt)
        return bool(result.rowcount)
