"""
User I/O models for API requests and responses.

``UserRead`` is the private view returned to the account owner; other users
see ``UserPublic`` or the compact ``UserSummary``.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from mathsolve_ai.core.models.domain.enums import AuthProvider

from .common import CamelModel, PaginationMeta, RequestModel

PROFILE_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


class UserSummary(CamelModel):
    """Compact author/creator reference embedded in other payloads."""

    id: str
    username: str
    profile_image: Optional[str] = None


class UserRead(CamelModel):
    """Account details visible to the account owner."""

    id: str
    username: str
    email: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    rank_points: int
    current_rank: str
    streak_count: int
    provider: AuthProvider
    email_verified: bool
    last_active_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserPublic(CamelModel):
    """Profile visible to everyone, with follow counters."""

    id: str
    username: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    rank_points: int
    current_rank: str
    streak_count: int
    created_at: datetime
    followers_count: int = 0
    following_count: int = 0
    is_following: Optional[bool] = None


class UserListItem(CamelModel):
    id: str
    username: str
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    rank_points: int
    current_rank: str
    created_at: datetime


class UserListPayload(CamelModel):
    users: List[UserListItem]
    pagination: PaginationMeta


class UserProfileUpdate(RequestModel):
    """Editable profile fields; omitted fields are left unchanged."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=30)
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_image: Optional[str] = Field(default=None, max_length=500)

    @field_validator("username")
    @classmethod
    def _username_charset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PROFILE_USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("profile_image")
    @classmethod
    def _profile_image_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return value
        if not URL_PATTERN.match(value):
            raise ValueError("Profile image must be a valid URL")
        return value


class AchievementRead(CamelModel):
    id: str
    type: str
    name: str
    description: Optional[str] = None
    earned_at: datetime


class UserStats(CamelModel):
    """Solving and contribution statistics of a user."""

    user_id: str
    problems_attempted: int
    problems_solved: int
    success_rate: float
    rank_points: int
    current_rank: str
    streak_count: int
    total_hints_used: int
    total_time_spent: int
    favorite_category: Optional[str] = None
    problems_created: int
    resources_created: int
    followers_count: int
    following_count: int
    achievements: List[AchievementRead] = Field(default_factory=list)


class AvatarPayload(CamelModel):
    profile_image: str
    user: UserRead
