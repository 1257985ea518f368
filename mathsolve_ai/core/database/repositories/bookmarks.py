"""Bookmark repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.bookmarks import Bookmark
from ..entities.resources import Resource
from .base import Page, QueryBuilder, SqlModelRepository


class BookmarkRepository(SqlModelRepository[Bookmark]):
    """Repository for resource bookmarks using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Bookmark)

    async def get_for_user(self, user_id: str, resource_id: str) -> Optional[Bookmark]:
        stmt = select(Bookmark).where((Bookmark.user_id == user_id) & (Bookmark.resource_id == resource_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_resource(self, resource_id: str) -> int:
        return await self.count(select(Bookmark).where(Bookmark.resource_id == resource_id))

    async def bookmarked_resources(self, user_id: str, page: int, limit: int) -> Page[Resource]:
        """Resources bookmarked by ``user_id``, most recently bookmarked first."""
        stmt = (
            select(Resource)
            .join(Bookmark, Bookmark.resource_id == Resource.id)
            .where(Bookmark.user_id == user_id)
        )
        stmt = QueryBuilder.apply_sorting(stmt, Bookmark.created_at, descending=True, tiebreaker=Resource.id)
        return await self.paginate(stmt, page, limit)

    async def delete_for_resource(self, resource_id: str) -> None:
        await self.session.execute(sa_delete(Bookmark).where(Bookmark.resource_id == resource_id))
