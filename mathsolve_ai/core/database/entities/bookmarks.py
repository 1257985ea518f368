"""Bookmark entity model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UtcDateTime, new_id, utc_now


class Bookmark(Base, table=True):
    """A user's saved resource.

    Table: bookmarks
    """

    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "resource_id", name="uq_bookmarks_user_resource"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    resource_id: str = Field(foreign_key="resources.id", index=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime, index=True)

    def __repr__(self) -> str:
        return f"Bookmark(user_id={self.user_id}, resource_id={self.resource_id})"
