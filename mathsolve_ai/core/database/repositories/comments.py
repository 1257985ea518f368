"""Comment repository."""

from __future__ import annotations

from sqlalchemy import delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.comments import Comment
from .base import Page, QueryBuilder, SqlModelRepository


class CommentRepository(SqlModelRepository[Comment]):
    """Repository for problem comments using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Comment)

    async def page_for_problem(self, problem_id: str, page: int, limit: int) -> Page[Comment]:
        stmt = select(Comment).where(Comment.problem_id == problem_id)
        stmt = QueryBuilder.apply_sorting(stmt, Comment.created_at, descending=False, tiebreaker=Comment.id)
        return await self.paginate(stmt, page, limit)

    async def count_for_problem(self, problem_id: str) -> int:
        return await self.count(select(Comment).where(Comment.problem_id == problem_id))

    async def delete_for_problem(self, problem_id: str) -> None:
        await self.session.execute(sa_delete(Comment).where(Comment.problem_id == problem_id))
