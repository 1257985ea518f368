"""
Problem quality scoring and user ranking.

Pure functions; the services call them whenever a problem's content,
engagement or ratings change, or a user's rank points move.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from mathsolve_ai.server.core.constant import HINT_PENALTY, RANK_THRESHOLDS, SOLVE_POINTS

INITIAL_SCORE_CAP = 80.0
MAX_SCORE = 100.0


def initial_quality_score(title: str, description: str, tags: Sequence[str], solution: Optional[str]) -> float:
    """Score a problem from its content alone, 10..80."""
    score = 10.0

    title_length = len(title)
    if 10 <= title_length <= 100:
        score += 15
    elif title_length >= 5:
        score += 10

    description_length = len(description)
    if description_length >= 100:
        score += 20
    elif description_length >= 50:
        score += 15
    elif description_length >= 20:
        score += 10

    score += min(len(tags) * 5, 15)

    if solution and solution.strip():
        score += 20

    return min(score, INITIAL_SCORE_CAP)


def engagement_quality_score(
    title: str,
    description: str,
    tags: Sequence[str],
    solution: Optional[str],
    view_count: int,
    attempt_count: int,
) -> float:
    """Content score plus bounded bonuses for views (max 10) and attempts (max 15)."""
    score = initial_quality_score(title, description, tags, solution)
    score += min(view_count * 0.1, 10)
    score += min(attempt_count * 0.5, 15)
    return round(min(score, MAX_SCORE), 2)


def rated_quality_score(base_score: float, avg_rating: float) -> float:
    """Apply the rating bonus: each star above one adds five points."""
    if avg_rating <= 0:
        return round(min(base_score, MAX_SCORE), 2)
    return round(min(base_score + (avg_rating - 1) * 5, MAX_SCORE), 2)


def rank_for_points(points: int) -> str:
    for threshold, rank in RANK_THRESHOLDS:
        if points >= threshold:
            return rank
    return RANK_THRESHOLDS[-1][1]


def solve_points(difficulty: str, hints_used: int) -> int:
    """Points for a correct answer: difficulty base minus a per-hint penalty, never below one."""
    base = SOLVE_POINTS.get(difficulty, SOLVE_POINTS["LOW"])
    return max(base - hints_used * HINT_PENALTY, 1)


_WHITESPACE = re.compile(r"\s+")


def normalize_answer(answer: str) -> str:
    """Case-fold and drop all whitespace so ``x = 4`` matches ``X=4``."""
    return _WHITESPACE.sub("", answer).casefold()
