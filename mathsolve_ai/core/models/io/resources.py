"""Learning resource I/O models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType

from .common import CamelModel, PaginationMeta, RequestModel
from .users import UserSummary


class ResourceCreate(RequestModel):
    """Schema for creating a resource via API."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=50, max_length=50000)
    type: ResourceType
    category: str = Field(min_length=1, max_length=50)
    difficulty: Optional[Difficulty] = None


class ResourceUpdate(RequestModel):
    """Schema for partially updating a resource via API."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=50, max_length=50000)
    type: Optional[ResourceType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    difficulty: Optional[Difficulty] = None


class ResourceRead(CamelModel):
    """Schema for reading a resource from API."""

    id: str
    title: str
    content: str
    type: ResourceType
    category: str
    difficulty: Optional[Difficulty] = None
    author_id: str
    author: Optional[UserSummary] = None
    view_count: int
    rating: float
    bookmark_count: int = 0
    is_bookmarked: Optional[bool] = None
    created_at: datetime
    updated_at: datetime


class ResourceListPayload(CamelModel):
    resources: List[ResourceRead]
    pagination: PaginationMeta


class ResourceStats(CamelModel):
    total: int
    by_category: Dict[str, int]
    by_type: Dict[str, int]
    by_difficulty: Dict[str, int]


class BookmarkRead(CamelModel):
    id: str
    user_id: str
    resource_id: str
    created_at: datetime
