"""Tests for the generic repository layer: pages, query building and CRUD."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from mathsolve_ai.core.database.base import UtcDateTime, utc_now
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.base import Page, QueryBuilder, escape_like
from mathsolve_ai.core.database.utils import normalize_url


class TestPage:
    @pytest.mark.parametrize(
        "total,page,limit,pages,has_next,has_prev",
        [
            (0, 1, 10, 0, False, False),
            (10, 1, 10, 1, False, False),
            (11, 1, 10, 2, True, False),
            (25, 3, 10, 3, False, True),
            (5, 1, 0, 0, False, False),
        ],
    )
    def test_navigation(self, total, page, limit, pages, has_next, has_prev):
        result = Page(items=[], total=total, page=page, limit=limit)
        assert result.total_pages == pages
        assert result.has_next is has_next
        assert result.has_prev is has_prev


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql+psycopg2://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
            ("sqlite:///./app.db", "sqlite+aiosqlite:///./app.db"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_drivers(self, url, expected):
        assert normalize_url(url) == expected


class TestUtcDateTime:
    def test_utc_now_is_aware(self):
        assert utc_now().utcoffset() == timedelta(0)

    def test_naive_values_are_taken_as_utc(self):
        column_type = UtcDateTime()
        naive = datetime(2030, 1, 1, 12, 0)
        assert column_type.process_bind_param(naive, None) == naive.replace(tzinfo=timezone.utc)
        assert column_type.process_result_value(naive, None).tzinfo is timezone.utc

    def test_offsets_are_normalized_to_utc(self):
        column_type = UtcDateTime()
        local = datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        bound = column_type.process_bind_param(local, None)
        assert bound.tzinfo is timezone.utc
        assert bound.hour == 12

    def test_none_passes_through(self):
        column_type = UtcDateTime()
        assert column_type.process_bind_param(None, None) is None
        assert column_type.process_result_value(None, None) is None


@pytest.mark.parametrize(
    "term,expected",
    [
        ("roots", "roots"),
        ("50%", "50\\%"),
        ("x_1", "x\\_1"),
        ("a\\b", "a\\\\b"),
    ],
)
def test_escape_like(term, expected):
    assert escape_like(term) == expected


class TestQueryBuilder:
    def test_filters_skip_none_and_unknown_columns(self):
        stmt = QueryBuilder.apply_filters(select(User), User, {"username": "alice", "bio": None, "nope": 1})
        sql = str(stmt)
        assert "users.username = " in sql
        assert "users.bio" not in sql.split("WHERE", 1)[1]

    def test_search_without_term_is_unchanged(self):
        stmt = select(User)
        assert QueryBuilder.apply_search(stmt, [User.username], None) is stmt
        assert QueryBuilder.apply_search(stmt, [User.username], "") is stmt

    def test_pagination_none_is_unchanged(self):
        stmt = select(User)
        assert str(QueryBuilder.apply_pagination(stmt, None, None)) == str(stmt)


class TestSqlModelRepository:
    async def test_crud_cycle(self, repos):
        user = await repos.users.create(User(username="carol", email="carol@example.com"))
        assert user.id

        fetched = await repos.users.get_by_id(user.id)
        assert fetched is not None and fetched.username == "carol"

        fetched.bio = "Loves primes"
        updated = await repos.users.update(fetched)
        assert updated.bio == "Loves primes"

        assert await repos.users.delete(user.id) is True
        assert await repos.users.get_by_id(user.id) is None
        assert await repos.users.delete(user.id) is False

    async def test_list_with_filters_and_pagination(self, repos, make_user):
        for name in ("ann", "ben", "cal"):
            await make_user(name)

        assert len(await repos.users.list()) == 3
        assert [u.username for u in await repos.users.list(filters={"username": "ben"})] == ["ben"]
        assert len(await repos.users.list(limit=2, offset=2)) == 1

    async def test_paginate_reports_unpaged_total(self, repos, make_user):
        for name in ("ann", "ben", "cal"):
            await make_user(name)

        stmt = QueryBuilder.apply_sorting(select(User), User.username, descending=False)
        page = await repos.users.paginate(stmt, page=2, limit=2)
        assert page.total == 3
        assert [u.username for u in page.items] == ["cal"]

    async def test_count_by_reports_zero_for_missing_keys(self, repos, make_user, make_problem):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await make_problem(alice)
        await make_problem(alice, title="Second")

        from mathsolve_ai.core.database.entities.problems import Problem

        counts = await repos.problems.count_by(Problem.creator_id, [alice.id, bob.id])
        assert counts == {alice.id: 2, bob.id: 0}
        assert await repos.problems.count_by(Problem.creator_id, []) == {}
