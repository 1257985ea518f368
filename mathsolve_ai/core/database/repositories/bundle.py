"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, so a service can touch several tables in a single
transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .achievements import AchievementRepository
from .bookmarks import BookmarkRepository
from .comments import CommentRepository
from .follows import UserFollowRepository
from .problems import ProblemRepository
from .ratings import ProblemRatingRepository
from .resources import ResourceRepository
from .solutions import SolutionRepository
from .users import UserRepository


@dataclass(frozen=True)
class RepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    users: UserRepository
    problems: ProblemRepository
    resources: ResourceRepository
    ratings: ProblemRatingRepository
    solutions: SolutionRepository
    comments: CommentRepository
    bookmarks: BookmarkRepository
    follows: UserFollowRepository
    achievements: AchievementRepository


def build_repos(session: AsyncSession) -> RepoBundle:
    """Build a RepoBundle bound to ``session``.

    Args:
        session: Async session shared by every repository

    Returns:
        Bundle containing all repository instances
    """
    return RepoBundle(
        users=UserRepository(session),
        problems=ProblemRepository(session),
        resources=ResourceRepository(session),
        ratings=ProblemRatingRepository(session),
        solutions=SolutionRepository(session),
        comments=CommentRepository(session),
        bookmarks=BookmarkRepository(session),
        follows=UserFollowRepository(session),
        achievements=AchievementRepository(session),
    )
