"""Tests for the per-client rate limiting dependencies."""

from unittest.mock import Mock

import pytest
from httpx import AsyncClient

from mathsolve_ai.core.errors import RateLimitExceededError
from mathsolve_ai.server.core.config import settings
from mathsolve_ai.server.middleware.rate_limit import RateLimit, client_key, reset_rate_limits


@pytest.fixture
async def rate_limits_on(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    await reset_rate_limits()
    yield
    await reset_rate_limits()


def _request(headers=None, host="10.0.0.1"):
    request = Mock()
    request.headers = headers or {}
    request.client.host = host
    request.url.path = "/api/test"
    return request


class TestClientKey:
    def test_uses_first_forwarded_hop(self):
        assert client_key(_request({"x-forwarded-for": "203.0.113.7, 10.0.0.2"})) == "203.0.113.7"

    def test_falls_back_to_peer(self):
        assert client_key(_request()) == "10.0.0.1"

    def test_unknown_without_client(self):
        request = _request()
        request.client = None
        assert client_key(request) == "unknown"


class TestRateLimit:
    async def test_disabled_never_blocks(self, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_enabled", False)
        limit = RateLimit("follow", "slow down")
        for _ in range(20):
            await limit(_request())

    async def test_budget_is_enforced_per_client(self, rate_limits_on):
        limit = RateLimit("follow", "slow down")
        for _ in range(10):
            await limit(_request(host="10.0.0.1"))

        with pytest.raises(RateLimitExceededError) as exc_info:
            await limit(_request(host="10.0.0.1"))
        assert exc_info.value.message == "slow down"
        assert 1 <= exc_info.value.retry_after <= 300

        await limit(_request(host="10.0.0.2"))

    async def test_reset_clears_hits(self, rate_limits_on):
        limit = RateLimit("auth", "slow down")
        for _ in range(5):
            await limit(_request())
        await reset_rate_limits()
        await limit(_request())


async def test_auth_endpoints_return_429(client: AsyncClient, rate_limits_on):
    credentials = {"email": "nobody@example.com", "password": "WrongPass1!"}
    for _ in range(5):
        response = await client.post("/api/auth/login", json=credentials)
        assert response.status_code == 401

    response = await client.post("/api/auth/login", json=credentials)
    assert response.status_code == 429
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Too many authentication attempts, please try again later."
    assert body["retryAfter"] >= 1
    assert response.headers["Retry-After"] == str(body["retryAfter"])
