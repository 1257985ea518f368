"""
Database entity models.

Importing this package registers every table with ``Base.metadata``.
"""

from .achievements import Achievement
from .bookmarks import Bookmark
from .comments import Comment
from .follows import UserFollow
from .problems import Problem
from .ratings import ProblemRating
from .resources import Resource
from .solutions import Solution
from .users import User

__all__ = [
    "Achievement",
    "Bookmark",
    "Comment",
    "Problem",
    "ProblemRating",
    "Resource",
    "Solution",
    "User",
    "UserFollow",
]
