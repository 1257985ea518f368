"""
User Service.

Public profiles, profile editing, avatar uploads, user search, statistics
and the follower graph.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from mathsolve_ai.core.database.entities.follows import UserFollow
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.database.repositories.bundle import build_repos
from mathsolve_ai.core.errors import BadRequestError, ConflictError, NotFoundError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.models.domain.enums import SortOrder
from mathsolve_ai.core.models.io.users import (
    AchievementRead,
    UserProfileUpdate,
    UserPublic,
    UserStats,
)
from mathsolve_ai.server.core.config import settings
from mathsolve_ai.server.core.constant import AVATAR_CONTENT_TYPES

logger = get_logger(__name__)

USER_SORT_COLUMNS = {
    "username": User.username,
    "rankPoints": User.rank_points,
    "createdAt": User.created_at,
}

AVATAR_URL_PREFIX = "/uploads/avatars/"


class UserService:
    """User profile and social-graph operations bound to one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repos = build_repos(session)

    async def get_user(self, user_id: str) -> User:
        user = await self.repos.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_public_profile(self, user_id: str, viewer: Optional[User] = None) -> UserPublic:
        """Public profile with follow counters; ``is_following`` only for signed-in viewers."""
        user = await self.get_user(user_id)
        profile = UserPublic.model_validate(user)
        profile.followers_count = await self.repos.follows.count_followers(user.id)
        profile.following_count = await self.repos.follows.count_following(user.id)
        if viewer is not None and viewer.id != user.id:
            profile.is_following = await self.repos.follows.get_pair(viewer.id, user.id) is not None
        return profile

    async def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        """
        Apply a partial profile update.

        Raises:
            BadRequestError: If the new username is taken by someone else
        """
        update_data = data.model_dump(exclude_unset=True)
        username = update_data.get("username")
        if username and username != user.username:
            existing = await self.repos.users.get_by_username(username)
            if existing is not None and existing.id != user.id:
                raise BadRequestError("Username is already taken")

        for key, value in update_data.items():
            if key == "username" and value is None:
                continue
            setattr(user, key, value or None)
        user = await self.repos.users.update(user)
        logger.info("Profile updated", extra={"user_id": user.id, "fields": sorted(update_data)})
        return user

    async def save_avatar(self, user: User, content_type: Optional[str], payload: bytes) -> User:
        """
        Store an uploaded avatar image and point the profile at it.

        Raises:
            BadRequestError: For unsupported image types, empty or oversized files
        """
        extension = AVATAR_CONTENT_TYPES.get((content_type or "").lower())
        if extension is None:
            raise BadRequestError("Only JPEG, PNG, WebP and GIF images are allowed")
        if not payload:
            raise BadRequestError("Avatar file is empty")
        if len(payload) > settings.uploads.max_avatar_bytes:
            raise BadRequestError("Avatar file is too large")

        avatar_dir = Path(settings.uploads.directory) / "avatars"
        avatar_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{user.id}_{uuid.uuid4().hex}{extension}"
        (avatar_dir / filename).write_bytes(payload)

        previous = user.profile_image
        user.profile_image = f"{AVATAR_URL_PREFIX}{filename}"
        user = await self.repos.users.update(user)

        if previous and previous.startswith(AVATAR_URL_PREFIX):
            old_file = avatar_dir / Path(previous).name
            if old_file.is_file():
                old_file.unlink()
        logger.info("Avatar updated", extra={"user_id": user.id, "file": filename})
        return user

    async def search_users(
        self,
        term: Optional[str],
        page: int,
        limit: int,
        sort_by: str,
        sort_order: SortOrder,
    ) -> Page[User]:
        return await self.repos.users.search(
            term,
            page,
            limit,
            USER_SORT_COLUMNS[sort_by],
            descending=sort_order == SortOrder.DESC,
        )

    async def get_stats(self, user_id: str) -> UserStats:
        user = await self.get_user(user_id)
        solutions = await self.repos.solutions.list_for_user(user.id)
        solved = [solution for solution in solutions if solution.is_correct]
        categories = await self.repos.solutions.solved_categories(user.id)
        achievements = await self.repos.achievements.list_for_user(user.id)

        attempted = len(solutions)
        return UserStats(
            user_id=user.id,
            problems_attempted=attempted,
            problems_solved=len(solved),
            success_rate=round(len(solved) / attempted * 100, 2) if attempted else 0.0,
            rank_points=user.rank_points,
            current_rank=user.current_rank,
            streak_count=user.streak_count,
            total_hints_used=sum(solution.hints_used for solution in solutions),
            total_time_spent=sum(solution.time_spent for solution in solutions),
            favorite_category=categories[0][0] if categories else None,
            problems_created=await self.repos.problems.count_by_creator(user.id),
            resources_created=await self.repos.resources.count_by_author(user.id),
            followers_count=await self.repos.follows.count_followers(user.id),
            following_count=await self.repos.follows.count_following(user.id),
            achievements=[AchievementRead.model_validate(achievement) for achievement in achievements],
        )

    async def follow(self, follower: User, target_id: str) -> UserFollow:
        """
        Follow another user.

        Raises:
            BadRequestError: When following yourself
            NotFoundError: If the target does not exist
            ConflictError: If already following
        """
        if follower.id == target_id:
            raise BadRequestError("You cannot follow yourself")
        await self.get_user(target_id)
        if await self.repos.follows.get_pair(follower.id, target_id) is not None:
            raise ConflictError("You are already following this user")
        follow = await self.repos.follows.create(UserFollow(follower_id=follower.id, following_id=target_id))
        logger.info("User followed", extra={"follower_id": follower.id, "following_id": target_id})
        return follow

    async def unfollow(self, follower: User, target_id: str) -> None:
        """
        Stop following a user.

        Raises:
            NotFoundError: If no such follow exists
        """
        follow = await self.repos.follows.get_pair(follower.id, target_id)
        if follow is None:
            raise NotFoundError("You are not following this user")
        await self.repos.follows.delete(follow.id)

    async def followers(self, user_id: str, page: int, limit: int) -> Page[User]:
        await self.get_user(user_id)
        return await self.repos.follows.followers(user_id, page, limit)

    async def following(self, user_id: str, page: int, limit: int) -> Page[User]:
        await self.get_user(user_id)
        return await self.repos.follows.following(user_id, page, limit)

    async def achievements(self, user_id: str) -> List[AchievementRead]:
        await self.get_user(user_id)
        return [AchievementRead.model_validate(a) for a in await self.repos.achievements.list_for_user(user_id)]
