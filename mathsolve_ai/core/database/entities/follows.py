"""User follow entity model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UtcDateTime, new_id, utc_now


class UserFollow(Base, table=True):
    """Directed follow edge: follower_id follows following_id.

    Table: user_follows
    """

    __tablename__ = "user_follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    follower_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    following_id: str = Field(foreign_key="users.id", index=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def __repr__(self) -> str:
        return f"UserFollow(follower_id={self.follower_id}, following_id={self.following_id})"
