"""Unit tests for problem quality scoring and ranking."""

import pytest

from mathsolve_ai.server.services.scoring import (
    engagement_quality_score,
    initial_quality_score,
    normalize_answer,
    rank_for_points,
    rated_quality_score,
    solve_points,
)


class TestInitialQualityScore:
    def test_minimal_problem(self):
        assert initial_quality_score("Hi", "short", [], None) == 10.0

    def test_typical_problem(self):
        score = initial_quality_score("Solve the quadratic equation", "d" * 80, ["quadratics", "roots"], "x = 2")
        assert score == 70.0

    @pytest.mark.parametrize(
        "title,points",
        [("abcd", 0), ("abcde", 10), ("a" * 10, 15), ("a" * 100, 15), ("a" * 101, 10)],
    )
    def test_title_points(self, title, points):
        assert initial_quality_score(title, "", [], None) == 10 + points

    @pytest.mark.parametrize("length,points", [(19, 0), (20, 10), (50, 15), (100, 20)])
    def test_description_points(self, length, points):
        assert initial_quality_score("", "d" * length, [], None) == 10 + points

    def test_tag_points_are_capped(self):
        assert initial_quality_score("", "", ["a", "b", "c", "d", "e"], None) == 25

    def test_blank_solution_scores_nothing(self):
        assert initial_quality_score("", "", [], "   ") == 10

    def test_capped_at_eighty(self):
        assert initial_quality_score("a" * 50, "d" * 200, ["a", "b", "c"], "42") == 80


class TestEngagementQualityScore:
    def test_bonuses(self):
        assert engagement_quality_score("Hi", "short", [], None, view_count=20, attempt_count=4) == 14.0

    def test_bonuses_are_bounded(self):
        score = engagement_quality_score("a" * 50, "d" * 200, ["a", "b", "c"], "42", view_count=10_000, attempt_count=500)
        assert score == 100.0


class TestRatedQualityScore:
    @pytest.mark.parametrize(
        "base,avg,expected",
        [(70.0, 0.0, 70.0), (70.0, 1.0, 70.0), (70.0, 5.0, 90.0), (70.0, 3.5, 82.5), (95.0, 5.0, 100.0)],
    )
    def test_rating_bonus(self, base, avg, expected):
        assert rated_quality_score(base, avg) == expected


@pytest.mark.parametrize(
    "points,rank",
    [(0, "Bronze"), (999, "Bronze"), (1000, "Silver"), (2500, "Gold"), (5000, "Platinum"), (10000, "Diamond")],
)
def test_rank_for_points(points, rank):
    assert rank_for_points(points) == rank


@pytest.mark.parametrize(
    "difficulty,hints,points",
    [("LOW", 0, 10), ("MEDIUM", 0, 25), ("HIGH", 3, 44), ("LOW", 10, 1), ("UNKNOWN", 0, 10)],
)
def test_solve_points(difficulty, hints, points):
    assert solve_points(difficulty, hints) == points


def test_normalize_answer():
    assert normalize_answer(" X = 4 ") == normalize_answer("x=4") == "x=4"
