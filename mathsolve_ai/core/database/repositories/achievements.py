"""Achievement repository."""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.achievements import Achievement
from .base import SqlModelRepository


class AchievementRepository(SqlModelRepository[Achievement]):
    """Repository for earned achievements using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Achievement)

    async def list_for_user(self, user_id: str) -> List[Achievement]:
        stmt = select(Achievement).where(Achievement.user_id == user_id).order_by(Achievement.earned_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_type(self, user_id: str, achievement_type: str) -> bool:
        stmt = select(Achievement.id).where((Achievement.user_id == user_id) & (Achievement.type == achievement_type))
        result = await self.session.execute(stmt)
        return result.first() is not None
