"""Problem rating entity model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UtcDateTime, new_id, utc_now


class ProblemRating(Base, table=True):
    """A 1..5 star rating of a problem, at most one per user.

    Table: problem_ratings
    """

    __tablename__ = "problem_ratings"
    __table_args__ = (
        UniqueConstraint("problem_id", "user_id", name="uq_problem_ratings_problem_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    problem_id: str = Field(foreign_key="problems.id", index=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    rating: int = Field(ge=1, le=5)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=UtcDateTime, sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"ProblemRating(problem_id={self.problem_id}, user_id={self.user_id}, rating={self.rating})"
