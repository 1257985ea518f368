"""
Password hashing and JWT helpers.

Access tokens authenticate API calls and are short lived. Refresh tokens are
signed with a separate secret, carry the user's ``token_version`` and travel
in an httpOnly cookie; bumping the version revokes every outstanding refresh
token for that user.
"""

from __future__ import annotations

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from mathsolve_ai.server.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.security.bcrypt_rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(claims: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    jwt_config = settings.jwt
    now = datetime.now(timezone.utc)
    to_encode = dict(claims)
    to_encode.update(
        {
            "iat": now,
            "exp": now + expires_delta,
            "iss": jwt_config.issuer,
            "aud": jwt_config.audience,
        }
    )
    return jwt.encode(to_encode, secret, algorithm=jwt_config.algorithm)


def _decode(token: str, secret: str, expected_type: str) -> Dict[str, Any]:
    jwt_config = settings.jwt
    payload = jwt.decode(
        token,
        secret,
        algorithms=[jwt_config.algorithm],
        audience=jwt_config.audience,
        issuer=jwt_config.issuer,
    )
    if payload.get("type") != expected_type or not payload.get("sub"):
        raise JWTError(f"Expected a {expected_type} token")
    return payload


def create_access_token(user_id: str, email: str, username: str) -> str:
    """Sign a short-lived access token for ``user_id``."""
    claims = {"sub": user_id, "email": email, "username": username, "type": ACCESS_TOKEN_TYPE}
    return _encode(claims, settings.jwt.secret, timedelta(minutes=settings.jwt.access_expire_minutes))


def create_refresh_token(user_id: str, email: str, token_version: int) -> str:
    """Sign a refresh token; ``jti`` keeps rotated tokens distinct."""
    claims = {
        "sub": user_id,
        "email": email,
        "tokenVersion": token_version,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
    }
    return _encode(claims, settings.jwt.refresh_secret, timedelta(days=settings.jwt.refresh_expire_days))


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify an access token.

    Raises:
        JWTError: If the signature, expiry, issuer, audience or type is wrong
    """
    return _decode(token, settings.jwt.secret, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """Verify a refresh token.

    Raises:
        JWTError: If the signature, expiry, issuer, audience or type is wrong
    """
    return _decode(token, settings.jwt.refresh_secret, REFRESH_TOKEN_TYPE)


def generate_one_time_token() -> tuple[str, str]:
    """Create a random URL-safe token and the digest stored in the database.

    Returns:
        ``(token, token_hash)``; only the hash is persisted
    """
    token = secrets.token_urlsafe(32)
    return token, hash_one_time_token(token)


def hash_one_time_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
