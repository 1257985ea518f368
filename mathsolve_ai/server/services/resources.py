"""
Resource Service.

Listing, search, CRUD and statistics of learning resources plus the user's
bookmarks. Deleting a resource removes its bookmarks in the same transaction.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from mathsolve_ai.core.database.base import utc_now
from mathsolve_ai.core.database.entities.bookmarks import Bookmark
from mathsolve_ai.core.database.entities.resources import Resource
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.database.repositories.bundle import build_repos
from mathsolve_ai.core.errors import ConflictError, ForbiddenError, NotFoundError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType, SortOrder
from mathsolve_ai.core.models.io.resources import (
    BookmarkRead,
    ResourceCreate,
    ResourceRead,
    ResourceStats,
    ResourceUpdate,
)
from mathsolve_ai.core.models.io.users import UserSummary

logger = get_logger(__name__)

RESOURCE_SORT_COLUMNS = {
    "createdAt": Resource.created_at,
    "viewCount": Resource.view_count,
    "rating": Resource.rating,
    "title": Resource.title,
}


class ResourceService:
    """Learning resource operations bound to one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repos = build_repos(session)

    async def _present_many(self, resources: Sequence[Resource]) -> List[ResourceRead]:
        authors = await self.repos.users.get_many(resource.author_id for resource in resources)
        bookmark_counts = await self.repos.bookmarks.count_by(
            Bookmark.resource_id, [resource.id for resource in resources]
        )
        return [
            self._present(resource, authors.get(resource.author_id), bookmark_counts.get(resource.id, 0))
            for resource in resources
        ]

    @staticmethod
    def _present(
        resource: Resource,
        author: Optional[User],
        bookmark_count: int,
        is_bookmarked: Optional[bool] = None,
    ) -> ResourceRead:
        read = ResourceRead.model_validate(resource)
        read.author = UserSummary.model_validate(author) if author is not None else None
        read.bookmark_count = bookmark_count
        read.is_bookmarked = is_bookmarked
        return read

    async def present(self, resource: Resource, viewer: Optional[User] = None) -> ResourceRead:
        is_bookmarked = None
        if viewer is not None:
            is_bookmarked = await self.repos.bookmarks.get_for_user(viewer.id, resource.id) is not None
        return self._present(
            resource,
            await self.repos.users.get_by_id(resource.author_id),
            await self.repos.bookmarks.count_for_resource(resource.id),
            is_bookmarked,
        )

    async def list_resources(
        self,
        page: int,
        limit: int,
        category: Optional[str] = None,
        type: Optional[ResourceType] = None,
        difficulty: Optional[Difficulty] = None,
        author_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Page[ResourceRead]:
        stmt = self.repos.resources.build_query(
            category=category,
            type=type,
            difficulty=difficulty,
            author_id=author_id,
            search=search,
        )
        result = await self.repos.resources.find_page(
            stmt, page, limit, RESOURCE_SORT_COLUMNS[sort_by], descending=sort_order == SortOrder.DESC
        )
        return Page(items=await self._present_many(result.items), total=result.total, page=page, limit=limit)

    async def get_resource(self, resource_id: str) -> Resource:
        resource = await self.repos.resources.get_by_id(resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        return resource

    async def view_resource(self, resource_id: str, viewer: Optional[User] = None) -> ResourceRead:
        """Record a view and return the resource with the new view count."""
        resource = await self.get_resource(resource_id)
        await self.repos.resources.increment_view_count(resource.id)
        await self.session.refresh(resource)
        return await self.present(resource, viewer)

    async def create_resource(self, author: User, data: ResourceCreate) -> ResourceRead:
        resource = await self.repos.resources.create(Resource(**data.model_dump(), author_id=author.id))
        logger.info(f"Resource created: {resource.title}", extra={"resource_id": resource.id, "author_id": author.id})
        return await self.present(resource, author)

    def _ensure_author(self, resource: Resource, user: User, action: str) -> None:
        if resource.author_id != user.id:
            raise ForbiddenError(f"You can only {action} your own resources")

    async def update_resource(self, user: User, resource_id: str, data: ResourceUpdate) -> ResourceRead:
        """
        Partially update a resource owned by ``user``.

        ``difficulty`` may be explicitly set to null; other fields ignore nulls.
        """
        resource = await self.get_resource(resource_id)
        self._ensure_author(resource, user, "update")

        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key != "difficulty":
                continue
            setattr(resource, key, value)
        resource.updated_at = utc_now()
        resource = await self.repos.resources.update(resource)
        logger.info("Resource updated", extra={"resource_id": resource.id, "fields": sorted(update_data)})
        return await self.present(resource, user)

    async def delete_resource(self, user: User, resource_id: str) -> None:
        """Delete a resource and its bookmarks atomically."""
        resource = await self.get_resource(resource_id)
        self._ensure_author(resource, user, "delete")

        try:
            await self.repos.bookmarks.delete_for_resource(resource.id)
            await self.repos.resources.delete_by_id(resource.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.error("Resource deletion rolled back", exc_info=True, extra={"resource_id": resource_id})
            raise
        logger.info("Resource deleted", extra={"resource_id": resource_id, "author_id": user.id})

    async def stats(self) -> ResourceStats:
        return ResourceStats(
            total=await self.repos.resources.count(self.repos.resources.build_query()),
            by_category=await self.repos.resources.group_counts(Resource.category),
            by_type=await self.repos.resources.group_counts(Resource.type),
            by_difficulty=await self.repos.resources.group_counts(Resource.difficulty),
        )

    async def bookmark(self, user: User, resource_id: str) -> BookmarkRead:
        """
        Bookmark a resource.

        Raises:
            NotFoundError: If the resource does not exist
            ConflictError: If already bookmarked
        """
        resource = await self.get_resource(resource_id)
        if await self.repos.bookmarks.get_for_user(user.id, resource.id) is not None:
            raise ConflictError("Resource already bookmarked")
        bookmark = await self.repos.bookmarks.create(Bookmark(user_id=user.id, resource_id=resource.id))
        return BookmarkRead.model_validate(bookmark)

    async def remove_bookmark(self, user: User, resource_id: str) -> None:
        bookmark = await self.repos.bookmarks.get_for_user(user.id, resource_id)
        if bookmark is None:
            raise NotFoundError("Bookmark not found")
        await self.repos.bookmarks.delete(bookmark.id)

    async def bookmarked(self, user: User, page: int, limit: int) -> Page[ResourceRead]:
        result = await self.repos.bookmarks.bookmarked_resources(user.id, page, limit)
        items = await self._present_many(result.items)
        for item in items:
            item.is_bookmarked = True
        return Page(items=items, total=result.total, page=page, limit=limit)
