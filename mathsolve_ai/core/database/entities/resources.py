"""
Resource entity model.

A resource is a learning-material record (tutorial, guide or reference)
written by a user.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import Field

from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType

from ..base import Base, UtcDateTime, new_id, utc_now


class ResourceBase(Base):
    """Base fields for a learning resource."""

    title: str = Field(max_length=200, description="Resource title")
    content: str = Field(sa_column=Column(Text, nullable=False), description="Resource body")
    type: ResourceType = Field(index=True, description="Kind of material")
    category: str = Field(max_length=50, index=True, description="Free-form category name")
    difficulty: Optional[Difficulty] = Field(default=None, description="Optional difficulty level")


class Resource(ResourceBase, table=True):
    """Persistent learning resource.

    Table: resources
    """

    __tablename__ = "resources"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=36)

    view_count: int = Field(default=0)
    rating: float = Field(default=0.0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime, index=True)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=UtcDateTime, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"Resource(id={self.id}, title={self.title}, type={self.type})"
