"""
User entity model.

A user owns problems and resources, rates problems, submits solutions,
bookmarks resources and follows other users. Accounts are either local
(password hash present) or linked to Google (provider/provider_id).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from mathsolve_ai.core.models.domain.enums import AuthProvider

from ..base import Base, UtcDateTime, new_id, utc_now


class UserBase(Base):
    """Base fields for a user account."""

    username: str = Field(max_length=30, unique=True, index=True, description="Public handle")
    email: str = Field(max_length=255, unique=True, index=True, description="Lowercased login email")
    bio: Optional[str] = Field(default=None, max_length=500, description="Short profile text")
    profile_image: Optional[str] = Field(default=None, max_length=500, description="Avatar URL")


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    # Credentials
    password_hash: Optional[str] = Field(default=None, max_length=255)
    provider: AuthProvider = Field(default=AuthProvider.LOCAL)
    provider_id: Optional[str] = Field(default=None, max_length=255, index=True)
    token_version: int = Field(default=0, description="Bumped to revoke outstanding refresh tokens")

    # Verification and recovery
    email_verified: bool = Field(default=False)
    email_verification_token: Optional[str] = Field(default=None, max_length=128, index=True)
    password_reset_token: Optional[str] = Field(default=None, max_length=128, index=True)
    password_reset_expires: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)

    # Gamification
    rank_points: int = Field(default=0)
    current_rank: str = Field(default="Bronze", max_length=20)
    streak_count: int = Field(default=0)

    last_active_at: Optional[datetime] = Field(default=None, sa_type=UtcDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime, index=True)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=UtcDateTime, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, provider={self.provider})"
