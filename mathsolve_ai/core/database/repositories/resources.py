"""
Resource repository.

Filtered listing, view counting and the aggregate statistics shown on the
resources overview.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import delete as sa_delete, func, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType

from ..entities.resources import Resource
from .base import Page, QueryBuilder, SqlModelRepository


class ResourceRepository(SqlModelRepository[Resource]):
    """Repository for learning resource data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Resource)

    def build_query(
        self,
        category: Optional[str] = None,
        type: Optional[ResourceType] = None,
        difficulty: Optional[Difficulty] = None,
        author_id: Optional[str] = None,
        search: Optional[str] = None,
    ):
        stmt = QueryBuilder.apply_filters(
            select(Resource),
            Resource,
            {"category": category, "type": type, "difficulty": difficulty, "author_id": author_id},
        )
        return QueryBuilder.apply_search(stmt, [Resource.title, Resource.content, Resource.category], search)

    async def find_page(self, stmt, page: int, limit: int, sort_column: Any, descending: bool) -> Page[Resource]:
        stmt = QueryBuilder.apply_sorting(stmt, sort_column, descending, tiebreaker=Resource.id)
        return await self.paginate(stmt, page, limit)

    async def increment_view_count(self, resource_id: str) -> None:
        await self.session.execute(
            sa_update(Resource).where(Resource.id == resource_id).values(view_count=Resource.view_count + 1)
        )
        await self.session.commit()

    async def count_by_author(self, author_id: str) -> int:
        return await self.count(select(Resource).where(Resource.author_id == author_id))

    async def group_counts(self, column: Any) -> Dict[str, int]:
        """Count resources per distinct value of ``column``, ignoring NULLs."""
        stmt = select(column, func.count(Resource.id)).where(column.is_not(None)).group_by(column)
        result = await self.session.execute(stmt)
        counts: Dict[str, int] = {}
        for value, count in result.all():
            key = value.value if hasattr(value, "value") else str(value)
            counts[key] = int(count)
        return counts

    async def delete_by_id(self, resource_id: str) -> None:
        """Delete the resource row without committing."""
        await self.session.execute(sa_delete(Resource).where(Resource.id == resource_id))
