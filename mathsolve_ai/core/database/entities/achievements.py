"""Achievement entity model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, UtcDateTime, new_id, utc_now


class Achievement(Base, table=True):
    """A badge earned by a user.

    Table: achievements
    """

    __tablename__ = "achievements"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    type: str = Field(max_length=50, index=True)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    earned_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def __repr__(self) -> str:
        return f"Achievement(user_id={self.user_id}, type={self.type})"
