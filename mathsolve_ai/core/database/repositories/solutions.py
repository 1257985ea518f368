"""Solution repository."""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete as sa_delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.problems import Problem
from ..entities.solutions import Solution
from .base import SqlModelRepository


class SolutionRepository(SqlModelRepository[Solution]):
    """Repository for submitted solutions using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Solution)

    async def get_for_user(self, problem_id: str, user_id: str) -> Optional[Solution]:
        stmt = select(Solution).where((Solution.problem_id == problem_id) & (Solution.user_id == user_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_problem(self, problem_id: str) -> int:
        return await self.count(select(Solution).where(Solution.problem_id == problem_id))

    async def list_for_user(self, user_id: str) -> List[Solution]:
        result = await self.session.execute(select(Solution).where(Solution.user_id == user_id))
        return list(result.scalars().all())

    async def solved_categories(self, user_id: str) -> List[Tuple[str, int]]:
        """Categories of correctly solved problems with counts, most solved first."""
        stmt = (
            select(Problem.category, func.count(Solution.id))
            .join(Problem, Problem.id == Solution.problem_id)
            .where((Solution.user_id == user_id) & (Solution.is_correct == True))  # noqa: E712
            .group_by(Problem.category)
            .order_by(func.count(Solution.id).desc(), Problem.category.asc())
        )
        result = await self.session.execute(stmt)
        return [(category, int(count)) for category, count in result.all()]

    async def delete_for_problem(self, problem_id: str) -> None:
        await self.session.execute(sa_delete(Solution).where(Solution.problem_id == problem_id))
