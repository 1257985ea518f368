"""Tests for the table-specific repositories."""

from datetime import datetime, timedelta, timezone

from mathsolve_ai.core.database.base import utc_now
from mathsolve_ai.core.database.entities.achievements import Achievement
from mathsolve_ai.core.database.entities.bookmarks import Bookmark
from mathsolve_ai.core.database.entities.follows import UserFollow
from mathsolve_ai.core.database.entities.problems import Problem
from mathsolve_ai.core.database.entities.ratings import ProblemRating
from mathsolve_ai.core.database.entities.resources import Resource
from mathsolve_ai.core.database.entities.solutions import Solution
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType


class TestUserRepository:
    async def test_lookups(self, repos, make_user):
        user = await make_user("alice", provider_id="google-123", password_reset_token="reset-hash")

        assert (await repos.users.get_by_email("ALICE@example.com")).id == user.id
        assert (await repos.users.get_by_username("alice")).id == user.id
        assert (await repos.users.get_by_provider_id("google-123")).id == user.id
        assert (await repos.users.get_by_reset_token("reset-hash")).id == user.id
        assert await repos.users.get_by_username("nobody") is None

    async def test_timestamps_round_trip_as_utc(self, repos, make_user, in_memory_session):
        expires = datetime(2030, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        user = await make_user("timekeeper", password_reset_expires=expires)
        in_memory_session.expunge_all()

        stored = await repos.users.get_by_id(user.id)
        assert stored.created_at.tzinfo is not None
        assert stored.password_reset_expires == expires
        assert stored.password_reset_expires.utcoffset() == timedelta(0)
        assert stored.password_reset_expires > utc_now()

    async def test_get_many(self, repos, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        found = await repos.users.get_many([alice.id, bob.id, "missing"])
        assert set(found) == {alice.id, bob.id}
        assert await repos.users.get_many([]) == {}

    async def test_search_matches_username_or_email(self, repos, make_user):
        await make_user("alice")
        await make_user("alfred")
        await make_user("bob")

        page = await repos.users.search("AL", 1, 10, User.username, descending=False)
        assert [u.username for u in page.items] == ["alfred", "alice"]
        assert page.total == 2

        everyone = await repos.users.search(None, 1, 2, User.username, descending=True)
        assert [u.username for u in everyone.items] == ["bob", "alice"]
        assert everyone.total == 3


class TestProblemRepository:
    async def test_build_query_filters(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await make_problem(alice, "Quadratic roots", tags=["algebra", "roots"])
        await make_problem(alice, "Triangle area", category="Geometry", difficulty=Difficulty.HIGH, tags=["area"])
        await make_problem(bob, "Linear system", tags=["algebra"])

        async def titles(**filters):
            stmt = repos.problems.build_query(**filters)
            page = await repos.problems.find_page(stmt, 1, 10, Problem.title, descending=False)
            return [p.title for p in page.items]

        assert await titles(category="Geometry") == ["Triangle area"]
        assert await titles(difficulty=Difficulty.LOW) == ["Linear system", "Quadratic roots"]
        assert await titles(tags=["algebra"]) == ["Linear system", "Quadratic roots"]
        assert await titles(tags=["algebra", "roots"]) == ["Quadratic roots"]
        assert await titles(creator_id=bob.id) == ["Linear system"]
        assert await titles(search="TRIANGLE") == ["Triangle area"]

    async def test_tag_match_is_exact(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        await make_problem(alice, tags=["algebra2"])
        stmt = repos.problems.build_query(tags=["algebra"])
        assert await repos.problems.count(stmt) == 0

    async def test_counters(self, repos, make_user, make_problem, in_memory_session):
        alice = await make_user("alice")
        problem = await make_problem(alice)

        await repos.problems.increment_view_count(problem.id)
        await repos.problems.increment_attempt_count(problem.id)
        await in_memory_session.commit()
        await in_memory_session.refresh(problem)

        assert problem.view_count == 1
        assert problem.attempt_count == 1

    async def test_categories_most_used_first(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        await make_problem(alice, category="Geometry")
        await make_problem(alice, category="Algebra")
        await make_problem(alice, category="Algebra")

        assert await repos.problems.categories() == [("Algebra", 2), ("Geometry", 1)]
        assert await repos.problems.count_by_creator(alice.id) == 3


class TestRatingRepository:
    async def test_averages(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        bob = await make_user("bob")
        rated = await make_problem(alice)
        unrated = await make_problem(alice, title="Unrated")

        await repos.ratings.create(ProblemRating(problem_id=rated.id, user_id=alice.id, rating=5))
        await repos.ratings.create(ProblemRating(problem_id=rated.id, user_id=bob.id, rating=2))

        assert await repos.ratings.average_for_problem(rated.id) == 3.5
        assert await repos.ratings.average_for_problem(unrated.id) == 0.0
        assert await repos.ratings.count_for_problem(rated.id) == 2
        assert await repos.ratings.averages_for_problems([rated.id, unrated.id]) == {rated.id: 3.5, unrated.id: 0.0}
        assert (await repos.ratings.get_for_user(rated.id, bob.id)).rating == 2


class TestSolutionRepository:
    async def test_solved_categories(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        algebra = await make_problem(alice)
        algebra_two = await make_problem(alice, title="Another")
        geometry = await make_problem(alice, category="Geometry")

        for problem, correct in ((algebra, True), (algebra_two, True), (geometry, True)):
            await repos.solutions.create(Solution(problem_id=problem.id, user_id=alice.id, answer="4", is_correct=correct))

        bob = await make_user("bob")
        await repos.solutions.create(Solution(problem_id=geometry.id, user_id=bob.id, answer="3", is_correct=False))

        assert await repos.solutions.solved_categories(alice.id) == [("Algebra", 2), ("Geometry", 1)]
        assert await repos.solutions.solved_categories(bob.id) == []
        assert await repos.solutions.count_for_problem(geometry.id) == 2
        assert len(await repos.solutions.list_for_user(alice.id)) == 3


class TestResourceRepository:
    async def test_group_counts_skip_null(self, repos, make_user, make_resource):
        alice = await make_user("alice")
        await make_resource(alice, difficulty=Difficulty.LOW)
        await make_resource(alice, type=ResourceType.GUIDE)

        assert await repos.resources.group_counts(Resource.type) == {"TUTORIAL": 1, "GUIDE": 1}
        assert await repos.resources.group_counts(Resource.difficulty) == {"LOW": 1}
        assert await repos.resources.group_counts(Resource.category) == {"Calculus": 2}

    async def test_search_covers_category(self, repos, make_user, make_resource):
        alice = await make_user("alice")
        await make_resource(alice, category="Number Theory")
        await make_resource(alice)
        assert await repos.resources.count(repos.resources.build_query(search="number")) == 1


class TestBookmarkRepository:
    async def test_bookmarked_resources(self, repos, make_user, make_resource):
        alice = await make_user("alice")
        first = await make_resource(alice, title="First")
        await make_resource(alice, title="Second")

        await repos.bookmarks.create(Bookmark(user_id=alice.id, resource_id=first.id))

        page = await repos.bookmarks.bookmarked_resources(alice.id, 1, 10)
        assert [r.title for r in page.items] == ["First"]
        assert await repos.bookmarks.count_for_resource(first.id) == 1

        await repos.bookmarks.delete_for_resource(first.id)
        assert await repos.bookmarks.get_for_user(alice.id, first.id) is None


class TestFollowRepository:
    async def test_follow_graph(self, repos, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        cara = await make_user("cara")
        await repos.follows.create(UserFollow(follower_id=bob.id, following_id=alice.id))
        await repos.follows.create(UserFollow(follower_id=cara.id, following_id=alice.id))

        assert await repos.follows.count_followers(alice.id) == 2
        assert await repos.follows.count_following(bob.id) == 1
        assert await repos.follows.get_pair(bob.id, alice.id) is not None
        assert await repos.follows.get_pair(alice.id, bob.id) is None

        followers = await repos.follows.followers(alice.id, 1, 10)
        assert {u.username for u in followers.items} == {"bob", "cara"}
        following = await repos.follows.following(bob.id, 1, 10)
        assert [u.username for u in following.items] == ["alice"]


class TestAchievementRepository:
    async def test_has_type(self, repos, make_user):
        alice = await make_user("alice")
        await repos.achievements.create(Achievement(user_id=alice.id, type="first_solve", name="First Solve"))

        assert await repos.achievements.has_type(alice.id, "first_solve")
        assert not await repos.achievements.has_type(alice.id, "streak_7")
        assert [a.name for a in await repos.achievements.list_for_user(alice.id)] == ["First Solve"]
