"""
User repository.

Lookups by the unique identifiers a user can be found by (email, username,
Google subject, one-time tokens) plus the paginated user search.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import Page, QueryBuilder, SqlModelRepository


class UserRepository(SqlModelRepository[User]):
    """Repository for user account data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def _first(self, stmt) -> Optional[User]:
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).where(User.email == email.lower()))

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def get_by_provider_id(self, provider_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.provider_id == provider_id))

    async def get_by_reset_token(self, token_hash: str) -> Optional[User]:
        return await self._first(select(User).where(User.password_reset_token == token_hash))

    async def get_by_verification_token(self, token_hash: str) -> Optional[User]:
        return await self._first(select(User).where(User.email_verification_token == token_hash))

    async def get_many(self, user_ids: Iterable[str]) -> Dict[str, User]:
        """Fetch several users at once, keyed by id."""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def search(
        self,
        term: Optional[str],
        page: int,
        limit: int,
        sort_column: Any,
        descending: bool,
    ) -> Page[User]:
        """Search users by username or email substring.

        Args:
            term: Case-insensitive substring; ``None`` matches everyone
            page: 1-based page number
            limit: Page size
            sort_column: User column to order by
            descending: Sort direction

        Returns:
            Page of matching users
        """
        stmt = QueryBuilder.apply_search(select(User), [User.username, User.email], term)
        stmt = QueryBuilder.apply_sorting(stmt, sort_column, descending, tiebreaker=User.id)
        return await self.paginate(stmt, page, limit)
