from typing import AsyncGenerator, Awaitable, Callable, Dict
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEFAULT_PASSWORD = "Password123!"

RegisterUser = Callable[..., Awaitable[Dict]]


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    import mathsolve_ai.core.database.entities  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from mathsolve_ai.core.database import get_session
    from mathsolve_ai.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("mathsolve_ai.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: AsyncClient) -> RegisterUser:
    """Register an account through the API and return its data plus bearer headers."""

    async def _register(username: str = "alice", email: str = None, password: str = DEFAULT_PASSWORD) -> Dict:
        response = await client.post(
            "/api/auth/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "user": data["user"],
            "token": data["accessToken"],
            "headers": {"Authorization": f"Bearer {data['accessToken']}"},
        }

    return _register


@pytest_asyncio.fixture
async def alice(register_user: RegisterUser) -> Dict:
    return await register_user("alice")


@pytest_asyncio.fixture
async def bob(register_user: RegisterUser) -> Dict:
    return await register_user("bob")


@pytest.fixture
def problem_payload() -> Dict:
    return {
        "title": "Solve the quadratic equation",
        "description": "Find all real roots of x^2 - 5x + 6 = 0 and explain each step of your reasoning.",
        "difficulty": "MEDIUM",
        "category": "Algebra",
        "tags": ["quadratics", "roots"],
        "solution": "x = 2, x = 3",
    }


@pytest.fixture
def resource_payload() -> Dict:
    return {
        "title": "Introduction to Derivatives",
        "content": "A derivative measures how a function changes as its input changes. " * 3,
        "type": "TUTORIAL",
        "category": "Calculus",
        "difficulty": "LOW",
    }
