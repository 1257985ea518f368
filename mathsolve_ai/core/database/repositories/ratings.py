"""Problem rating repository."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from sqlalchemy import delete as sa_delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.ratings import ProblemRating
from .base import SqlModelRepository


class ProblemRatingRepository(SqlModelRepository[ProblemRating]):
    """Repository for problem ratings using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProblemRating)

    async def get_for_user(self, problem_id: str, user_id: str) -> Optional[ProblemRating]:
        stmt = select(ProblemRating).where(
            (ProblemRating.problem_id == problem_id) & (ProblemRating.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def average_for_problem(self, problem_id: str) -> float:
        """Mean rating of a problem, 0.0 when it has no ratings."""
        stmt = select(func.avg(ProblemRating.rating)).where(ProblemRating.problem_id == problem_id)
        result = await self.session.execute(stmt)
        average = result.scalar_one_or_none()
        return round(float(average), 2) if average is not None else 0.0

    async def count_for_problem(self, problem_id: str) -> int:
        return await self.count(select(ProblemRating).where(ProblemRating.problem_id == problem_id))

    async def delete_for_problem(self, problem_id: str) -> None:
        await self.session.execute(sa_delete(ProblemRating).where(ProblemRating.problem_id == problem_id))

    async def averages_for_problems(self, problem_ids: Iterable[str]) -> Dict[str, float]:
        """Mean rating per problem; problems without ratings map to 0.0."""
        ids = set(problem_ids)
        if not ids:
            return {}
        stmt = (
            select(ProblemRating.problem_id, func.avg(ProblemRating.rating))
            .where(ProblemRating.problem_id.in_(ids))
            .group_by(ProblemRating.problem_id)
        )
        result = await self.session.execute(stmt)
        averages = {problem_id: 0.0 for problem_id in ids}
        averages.update({problem_id: round(float(avg), 2) for problem_id, avg in result.all()})
        return averages
