"""
Google OAuth Client.

Builds the consent-screen URL and turns an authorization code or an ID token
into a verified ``GoogleIdentity``. In mock mode no request leaves the
process: a randomized canned identity is returned instead, so the sign-in
flow can be exercised without Google credentials. A mock code or token of
the form ``mock:<email>`` pins the identity's email.
"""

from __future__ import annotations

import random
import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from mathsolve_ai.core.errors import ApiError, BadRequestError, UnauthorizedError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.server.core.config import GoogleOAuthConfig, settings

logger = get_logger(__name__)

MOCK_CALLBACK_EMAIL = "user@gmail.com"
MOCK_TOKEN_EMAIL = "tokenuser@gmail.com"
MOCK_PICTURE = "https://lh3.googleusercontent.com/a/default-user"


@dataclass(frozen=True)
class GoogleIdentity:
    """The verified claims of a Google account."""

    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False


class GoogleOAuthClient:
    """Talks to Google's OAuth endpoints, or fakes them in mock mode."""

    def __init__(self, config: GoogleOAuthConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.config = config
        self._transport = transport

    @property
    def is_mock(self) -> bool:
        return self.config.mock

    def build_auth_url(self, state: Optional[str] = None) -> tuple[str, str]:
        """
        Build the Google consent-screen URL.

        Returns:
            ``(url, state)``

        Raises:
            ApiError: 500 when no client id is configured
        """
        if not self.config.client_id:
            raise ApiError("Google OAuth is not configured", status_code=500)
        state = state or secrets.token_urlsafe(16)
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "response_type": "code",
            "scope": "email profile",
            "state": state,
            "access_type": "offline",
            "prompt": "select_account",
        }
        return f"{self.config.auth_url}?{urlencode(params)}", state

    async def exchange_code(self, code: str) -> GoogleIdentity:
        """
        Exchange an authorization code for the signed-in Google identity.

        Raises:
            UnauthorizedError: If Google rejects the code
            ApiError: 502 when Google cannot be reached
        """
        if self.is_mock:
            return self._mock_identity(code, MOCK_CALLBACK_EMAIL)

        data = {
            "code": code,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_uri,
            "grant_type": "authorization_code",
        }
        payload = await self._call_google(
            "POST", self.config.token_url, "Failed to exchange Google authorization code", data=data
        )

        id_token = payload.get("id_token")
        if not id_token:
            raise UnauthorizedError("Google did not return an ID token")
        return await self.verify_id_token(id_token)

    async def verify_id_token(self, token: str) -> GoogleIdentity:
        """
        Validate a Google ID token and return its identity.

        Raises:
            UnauthorizedError: If the token is invalid or issued for another client
        """
        if self.is_mock:
            return self._mock_identity(token, MOCK_TOKEN_EMAIL)

        claims = await self._call_google(
            "GET", self.config.tokeninfo_url, "Invalid Google token", params={"id_token": token}
        )
        if claims.get("aud") != self.config.client_id:
            raise UnauthorizedError("Google token was issued for a different client")
        if not claims.get("sub") or not claims.get("email"):
            raise UnauthorizedError("Google token is missing required claims")

        return GoogleIdentity(
            subject=claims["sub"],
            email=claims["email"].lower(),
            name=claims.get("name"),
            picture=claims.get("picture"),
            email_verified=str(claims.get("email_verified", "false")).lower() == "true",
        )

    async def _call_google(self, method: str, url: str, rejected_message: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Send one request to Google and return its JSON object body.

        Raises:
            UnauthorizedError: ``rejected_message`` when Google answers with a non-200 status
            ApiError: 502 when Google is unreachable or answers with something other than a JSON object
        """
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Google request to {url} failed: {type(e).__name__}: {e}")
            raise ApiError("Google sign-in is temporarily unavailable", status_code=502) from e

        if response.status_code != 200:
            logger.warning(f"Google request to {url} was rejected with status {response.status_code}")
            raise UnauthorizedError(rejected_message)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Google request to {url} returned a non-JSON body")
            raise ApiError("Google returned an invalid response", status_code=502) from e
        if not isinstance(payload, dict):
            logger.error(f"Google request to {url} returned a non-object JSON body")
            raise ApiError("Google returned an invalid response", status_code=502)
        return payload

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=10.0, transport=self._transport)

    @staticmethod
    def _mock_identity(credential: str, default_email: str) -> GoogleIdentity:
        email = default_email
        if credential.startswith("mock:") and "@" in credential:
            email = credential[len("mock:"):].strip().lower()
        if not email:
            raise BadRequestError("Mock credential must carry an email")
        number = random.randint(1000, 9999)
        logger.debug(f"Issuing mock Google identity for {email}")
        return GoogleIdentity(
            subject=f"mock-google-{secrets.token_hex(8)}",
            email=email,
            name=f"Google User {number}",
            picture=MOCK_PICTURE,
            email_verified=True,
        )


def get_google_client() -> GoogleOAuthClient:
    """Dependency provider for the Google OAuth client."""
    return GoogleOAuthClient(settings.google)
