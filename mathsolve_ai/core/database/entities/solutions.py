"""
Solution entity model.

One row per (problem, user): a resubmission overwrites the previous attempt.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field

from ..base import Base, UtcDateTime, new_id, utc_now


class Solution(Base, table=True):
    """A user's submitted answer to a problem.

    Table: solutions
    """

    __tablename__ = "solutions"
    __table_args__ = (
        UniqueConstraint("problem_id", "user_id", name="uq_solutions_problem_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    problem_id: str = Field(foreign_key="problems.id", index=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)

    answer: str = Field(sa_column=Column(Text, nullable=False))
    is_correct: bool = Field(default=False)
    points_earned: int = Field(default=0)
    time_spent: int = Field(default=0, description="Seconds spent on the attempt")
    hints_used: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    def __repr__(self) -> str:
        return f"Solution(id={self.id}, problem_id={self.problem_id}, correct={self.is_correct})"
