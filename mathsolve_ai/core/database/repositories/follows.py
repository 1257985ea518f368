"""User follow repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.follows import UserFollow
from ..entities.users import User
from .base import Page, QueryBuilder, SqlModelRepository


class UserFollowRepository(SqlModelRepository[UserFollow]):
    """Repository for the follower graph using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserFollow)

    async def get_pair(self, follower_id: str, following_id: str) -> Optional[UserFollow]:
        stmt = select(UserFollow).where(
            (UserFollow.follower_id == follower_id) & (UserFollow.following_id == following_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_followers(self, user_id: str) -> int:
        return await self.count(select(UserFollow).where(UserFollow.following_id == user_id))

    async def count_following(self, user_id: str) -> int:
        return await self.count(select(UserFollow).where(UserFollow.follower_id == user_id))

    async def followers(self, user_id: str, page: int, limit: int) -> Page[User]:
        stmt = select(User).join(UserFollow, UserFollow.follower_id == User.id).where(UserFollow.following_id == user_id)
        stmt = QueryBuilder.apply_sorting(stmt, UserFollow.created_at, descending=True, tiebreaker=User.id)
        return await self.paginate(stmt, page, limit)

    async def following(self, user_id: str, page: int, limit: int) -> Page[User]:
        stmt = select(User).join(UserFollow, UserFollow.following_id == User.id).where(UserFollow.follower_id == user_id)
        stmt = QueryBuilder.apply_sorting(stmt, UserFollow.created_at, descending=True, tiebreaker=User.id)
        return await self.paginate(stmt, page, limit)
