"""Test configuration for database unit tests.

Provides an in-memory SQLite engine with every table created, a session
bound to it, and small factories for the rows most tests need.
"""

from __future__ import annotations

import json
from typing import AsyncGenerator, Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from mathsolve_ai.core.database.entities.problems import Problem
from mathsolve_ai.core.database.entities.resources import Resource
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.bundle import RepoBundle, build_repos
from mathsolve_ai.core.database.utils import create_all, create_sessionmaker
from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def repos(in_memory_session: AsyncSession) -> RepoBundle:
    return build_repos(in_memory_session)


@pytest.fixture
def make_user(repos: RepoBundle) -> Callable[..., Awaitable[User]]:
    async def _make(username: str, **fields) -> User:
        return await repos.users.create(User(username=username, email=f"{username}@example.com", **fields))

    return _make


@pytest.fixture
def make_problem(repos: RepoBundle) -> Callable[..., Awaitable[Problem]]:
    async def _make(creator: User, title: str = "Find x", **fields) -> Problem:
        tags = fields.pop("tags", [])
        defaults = {
            "description": "Solve for x in the given equation.",
            "difficulty": Difficulty.LOW,
            "category": "Algebra",
        }
        defaults.update(fields)
        return await repos.problems.create(
            Problem(title=title, tags=json.dumps(tags), creator_id=creator.id, **defaults)
        )

    return _make


@pytest.fixture
def make_resource(repos: RepoBundle) -> Callable[..., Awaitable[Resource]]:
    async def _make(author: User, title: str = "Limits explained", **fields) -> Resource:
        defaults = {
            "content": "Limits describe the value a function approaches near a point. " * 2,
            "type": ResourceType.TUTORIAL,
            "category": "Calculus",
        }
        defaults.update(fields)
        return await repos.resources.create(Resource(title=title, author_id=author.id, **defaults))

    return _make
