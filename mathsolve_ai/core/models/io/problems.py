"""
Problem I/O models for API requests and responses.

Tags are a list on the wire and a JSON string in the database; the read
model receives the parsed list from the service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints

from mathsolve_ai.core.models.domain.enums import Difficulty

from .common import CamelModel, PaginationMeta, RequestModel
from .users import UserSummary

Tag = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


class ProblemCreate(RequestModel):
    """Schema for creating a problem via API."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10, max_length=5000)
    difficulty: Difficulty
    category: str = Field(min_length=1, max_length=50)
    tags: List[Tag] = Field(default_factory=list, max_length=10)
    solution: Optional[str] = Field(default=None, max_length=5000)


class ProblemUpdate(RequestModel):
    """Schema for partially updating a problem via API."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10, max_length=5000)
    difficulty: Optional[Difficulty] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    tags: Optional[List[Tag]] = Field(default=None, max_length=10)
    solution: Optional[str] = Field(default=None, max_length=5000)


class ProblemCounts(CamelModel):
    ratings: int = 0
    solutions: int = 0
    comments: int = 0


class ProblemRead(CamelModel):
    """Schema for reading a problem from API."""

    id: str
    title: str
    description: str
    difficulty: Difficulty
    category: str
    tags: List[str]
    solution: Optional[str] = None
    creator_id: str
    creator: Optional[UserSummary] = None
    quality_score: float
    view_count: int
    attempt_count: int
    avg_rating: float = 0.0
    user_rating: Optional[int] = None
    counts: ProblemCounts = Field(default_factory=ProblemCounts)
    created_at: datetime
    updated_at: datetime


class ProblemListPayload(CamelModel):
    problems: List[ProblemRead]
    pagination: PaginationMeta


class CategoryCount(CamelModel):
    category: str
    count: int


class RatingCreate(RequestModel):
    rating: int = Field(ge=1, le=5, strict=True)


class RatingRead(CamelModel):
    id: str
    problem_id: str
    user_id: str
    rating: int
    avg_rating: float
    quality_score: float
    created_at: datetime
    updated_at: datetime


class SolutionCreate(RequestModel):
    answer: str = Field(min_length=1, max_length=5000)
    time_spent: int = Field(default=0, ge=0)
    hints_used: int = Field(default=0, ge=0)


class SolutionRead(CamelModel):
    id: str
    problem_id: str
    user_id: str
    answer: str
    is_correct: bool
    points_earned: int
    time_spent: int
    hints_used: int
    created_at: datetime
    rank_points: int
    current_rank: str


class CommentCreate(RequestModel):
    content: str = Field(min_length=1, max_length=2000)


class CommentRead(CamelModel):
    id: str
    problem_id: str
    content: str
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class CommentListPayload(CamelModel):
    comments: List[CommentRead]
    pagination: PaginationMeta
