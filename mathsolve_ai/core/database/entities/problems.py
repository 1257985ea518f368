"""
Problem entity model.

A problem is a user-authored math exercise. Tags are stored as a JSON
encoded list of strings; quality_score is a 0..100 heuristic maintained by
the problem service.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Text
from sqlmodel import Field

from mathsolve_ai.core.models.domain.enums import Difficulty

from ..base import Base, UtcDateTime, new_id, utc_now


class ProblemBase(Base):
    """Base fields for a problem."""

    title: str = Field(max_length=200, description="Problem title")
    description: str = Field(sa_column=Column(Text, nullable=False), description="Problem statement")
    difficulty: Difficulty = Field(index=True, description="Difficulty level")
    category: str = Field(max_length=50, index=True, description="Free-form category name")
    tags: str = Field(default="[]", sa_column=Column(Text, nullable=False, default="[]"), description="JSON list of tags")
    solution: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True), description="Reference answer")


class Problem(ProblemBase, table=True):
    """Persistent problem.

    Table: problems
    """

    __tablename__ = "problems"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    creator_id: str = Field(foreign_key="users.id", index=True, max_length=36)

    quality_score: float = Field(default=0.0, index=True)
    view_count: int = Field(default=0)
    attempt_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime, index=True)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=UtcDateTime, sa_column_kwargs={"onupdate": utc_now}
    )

    @property
    def tag_list(self) -> List[str]:
        try:
            tags = json.loads(self.tags or "[]")
        except json.JSONDecodeError:
            return []
        return [str(tag) for tag in tags] if isinstance(tags, list) else []

    def __repr__(self) -> str:
        return f"Problem(id={self.id}, title={self.title}, difficulty={self.difficulty})"
