"""
Problem repository.

Builds the filtered listing query, maintains view counters and provides
category aggregates.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import delete as sa_delete, func, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from mathsolve_ai.core.models.domain.enums import Difficulty

from ..entities.problems import Problem
from .base import Page, QueryBuilder, SqlModelRepository


class ProblemRepository(SqlModelRepository[Problem]):
    """Repository for problem data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Problem)

    def build_query(
        self,
        category: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
        search: Optional[str] = None,
        tags: Sequence[str] = (),
        creator_id: Optional[str] = None,
    ):
        """Build the select statement for a filtered problem listing.

        Every tag in ``tags`` must be present on the problem.
        """
        stmt = QueryBuilder.apply_filters(
            select(Problem),
            Problem,
            {"category": category, "difficulty": difficulty, "creator_id": creator_id},
        )
        stmt = QueryBuilder.apply_search(stmt, [Problem.title, Problem.description], search)
        for tag in tags:
            # tags are stored as a JSON list, so match the quoted element
            stmt = stmt.where(Problem.tags.contains(json.dumps(tag), autoescape=True))
        return stmt

    async def find_page(self, stmt, page: int, limit: int, sort_column: Any, descending: bool) -> Page[Problem]:
        stmt = QueryBuilder.apply_sorting(stmt, sort_column, descending, tiebreaker=Problem.id)
        return await self.paginate(stmt, page, limit)

    async def increment_view_count(self, problem_id: str) -> None:
        await self.session.execute(
            sa_update(Problem).where(Problem.id == problem_id).values(view_count=Problem.view_count + 1)
        )
        await self.session.commit()

    async def increment_attempt_count(self, problem_id: str) -> None:
        """Bump the attempt counter without committing."""
        await self.session.execute(
            sa_update(Problem).where(Problem.id == problem_id).values(attempt_count=Problem.attempt_count + 1)
        )

    async def categories(self) -> List[Tuple[str, int]]:
        """Distinct categories with their problem counts, most used first."""
        stmt = (
            select(Problem.category, func.count(Problem.id))
            .group_by(Problem.category)
            .order_by(func.count(Problem.id).desc(), Problem.category.asc())
        )
        result = await self.session.execute(stmt)
        return [(category, int(count)) for category, count in result.all()]

    async def count_by_creator(self, creator_id: str) -> int:
        return await self.count(select(Problem).where(Problem.creator_id == creator_id))

    async def delete_by_id(self, problem_id: str) -> None:
        """Delete the problem row without committing."""
        await self.session.execute(sa_delete(Problem).where(Problem.id == problem_id))
