"""
Data access layer.

One repository per table, all sharing the SqlModelRepository CRUD base, and
a RepoBundle that binds them to a single session.
"""

from .achievements import AchievementRepository
from .base import AsyncBaseRepository, Page, QueryBuilder, SqlModelRepository
from .bookmarks import BookmarkRepository
from .bundle import RepoBundle, build_repos
from .comments import CommentRepository
from .follows import UserFollowRepository
from .problems import ProblemRepository
from .ratings import ProblemRatingRepository
from .resources import ResourceRepository
from .solutions import SolutionRepository
from .users import UserRepository

__all__ = [
    "AchievementRepository",
    "AsyncBaseRepository",
    "BookmarkRepository",
    "CommentRepository",
    "Page",
    "ProblemRatingRepository",
    "ProblemRepository",
    "QueryBuilder",
    "RepoBundle",
    "ResourceRepository",
    "SolutionRepository",
    "SqlModelRepository",
    "UserFollowRepository",
    "UserRepository",
    "build_repos",
]
