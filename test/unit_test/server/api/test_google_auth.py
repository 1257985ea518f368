"""API tests for Google sign-in, mostly in mock mode."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from httpx import AsyncClient

from mathsolve_ai.server.core.config import GoogleOAuthConfig
from mathsolve_ai.server.services.google_oauth import GoogleOAuthClient, get_google_client

pytestmark = pytest.mark.asyncio


async def test_google_url(client: AsyncClient):
    response = await client.get("/api/auth/google/url")
    assert response.status_code == 200
    data = response.json()["data"]

    parsed = urlparse(data["url"])
    assert parsed.netloc == "accounts.google.com"
    query = parse_qs(parsed.query)
    assert query["client_id"] == ["test-client-id.apps.googleusercontent.com"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["email profile"]
    assert query["state"] == [data["state"]]
    assert query["access_type"] == ["offline"]
    assert query["prompt"] == ["select_account"]


async def test_google_url_not_configured(client: AsyncClient):
    from mathsolve_ai.server.main import app

    app.dependency_overrides[get_google_client] = lambda: GoogleOAuthClient(GoogleOAuthConfig(client_id=None))
    response = await client.get("/api/auth/google/url")
    assert response.status_code == 500
    assert response.json()["message"] == "Google OAuth is not configured"


async def test_callback_when_google_is_unreachable(client: AsyncClient):
    from mathsolve_ai.server.main import app

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    config = GoogleOAuthConfig(client_id="client-123", mock=False, token_url="https://mock/token")
    app.dependency_overrides[get_google_client] = lambda: GoogleOAuthClient(
        config, transport=httpx.MockTransport(handler)
    )
    response = await client.post("/api/auth/google/callback", json={"code": "auth-code"})
    assert response.status_code == 502
    assert response.json()["success"] is False


async def test_callback_requires_code(client: AsyncClient):
    response = await client.post("/api/auth/google/callback", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Authorization code is required"


async def test_token_requires_token(client: AsyncClient):
    response = await client.post("/api/auth/google/token", json={})
    assert response.status_code == 400


async def test_callback_creates_google_user(client: AsyncClient):
    response = await client.post("/api/auth/google/callback", json={"code": "any-code"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isNewUser"] is True
    assert data["user"]["email"] == "user@gmail.com"
    assert data["user"]["provider"] == "google"
    assert data["user"]["emailVerified"] is True
    assert data["accessToken"]
    assert "refreshToken=" in response.headers["set-cookie"]


async def test_token_sign_in_twice_reuses_account_by_email(client: AsyncClient):
    first = await client.post("/api/auth/google/token", json={"token": "mock:sam@gmail.com"})
    second = await client.post("/api/auth/google/token", json={"token": "mock:sam@gmail.com"})
    assert first.status_code == second.status_code == 200
    assert first.json()["data"]["isNewUser"] is True
    assert second.json()["data"]["isNewUser"] is False
    assert first.json()["data"]["user"]["id"] == second.json()["data"]["user"]["id"]


async def test_google_sign_in_links_existing_local_account(client: AsyncClient, register_user):
    local = await register_user("dana", email="dana@gmail.com")
    response = await client.post("/api/auth/google/token", json={"token": "mock:dana@gmail.com"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isNewUser"] is False
    assert data["user"]["id"] == local["user"]["id"]
    assert data["user"]["provider"] == "local"


async def test_link_google_account(client: AsyncClient, alice):
    response = await client.post(
        "/api/auth/google/link", json={"token": "mock:alice@example.com"}, headers=alice["headers"]
    )
    assert response.status_code == 200
    assert response.json()["data"]["emailVerified"] is True


async def test_link_google_email_mismatch(client: AsyncClient, alice):
    response = await client.post(
        "/api/auth/google/link", json={"token": "mock:someone@gmail.com"}, headers=alice["headers"]
    )
    assert response.status_code == 400


async def test_link_google_requires_auth(client: AsyncClient):
    response = await client.post("/api/auth/google/link", json={"token": "mock:someone@gmail.com"})
    assert response.status_code == 401
