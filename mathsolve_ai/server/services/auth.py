"""
Authentication Service.

Registration, credential login, refresh-token rotation, password recovery,
email verification and the account side of Google sign-in. Password hashing
runs in the thread pool so bcrypt never blocks the event loop.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from mathsolve_ai.core.database.base import utc_now
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.bundle import build_repos
from mathsolve_ai.core.errors import BadRequestError, ConflictError, UnauthorizedError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.models.domain.enums import AuthProvider
from mathsolve_ai.core.models.io.auth import RegisterRequest
from mathsolve_ai.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    generate_one_time_token,
    get_password_hash,
    hash_one_time_token,
    verify_password,
)
from mathsolve_ai.server.core.config import settings

from .google_oauth import GoogleIdentity

logger = get_logger(__name__)

_USERNAME_UNSAFE = re.compile(r"[^a-zA-Z0-9_]")


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    """Account lifecycle operations bound to one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repos = build_repos(session)

    def issue_tokens(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=create_access_token(user.id, user.email, user.username),
            refresh_token=create_refresh_token(user.id, user.email, user.token_version),
        )

    async def register(self, data: RegisterRequest) -> Tuple[User, TokenPair]:
        """
        Create a local account and sign the user in.

        Raises:
            ConflictError: If the email or username is already registered
        """
        if await self.repos.users.get_by_email(data.email):
            raise ConflictError("User with this email already exists")
        if await self.repos.users.get_by_username(data.username):
            raise ConflictError("Username is already taken")

        verification_token, verification_hash = generate_one_time_token()
        user = User(
            username=data.username,
            email=data.email.lower(),
            bio=data.bio or None,
            password_hash=await run_in_threadpool(get_password_hash, data.password),
            provider=AuthProvider.LOCAL,
            email_verification_token=verification_hash,
            last_active_at=utc_now(),
        )
        user = await self.repos.users.create(user)

        logger.info(f"User registered: {user.username}", extra={"user_id": user.id})
        logger.info(
            f"Email verification link for {user.email}: "
            f"{settings.frontend_url}/auth/verify-email?token={verification_token}",
            extra={"user_id": user.id},
        )
        return user, self.issue_tokens(user)

    async def login(self, email: str, password: str) -> Tuple[User, TokenPair]:
        """
        Authenticate with email and password.

        Raises:
            UnauthorizedError: If the email is unknown or the password is wrong
            BadRequestError: If the account only signs in through Google
        """
        user = await self.repos.users.get_by_email(email)
        if user is None:
            logger.warning("Login failed: unknown email", extra={"email": email})
            raise UnauthorizedError("Invalid email or password")
        if not user.password_hash:
            raise BadRequestError("This account uses Google sign-in. Please log in with Google.")
        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.warning("Login failed: wrong password", extra={"user_id": user.id})
            raise UnauthorizedError("Invalid email or password")

        user.last_active_at = utc_now()
        user = await self.repos.users.update(user)
        logger.info(f"User logged in: {user.username}", extra={"user_id": user.id})
        return user, self.issue_tokens(user)

    async def refresh(self, refresh_token: Optional[str]) -> Tuple[User, TokenPair]:
        """
        Exchange a valid refresh token for a new token pair.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired or revoked
        """
        if not refresh_token:
            raise UnauthorizedError("Refresh token not provided")
        try:
            payload = decode_refresh_token(refresh_token)
        except JWTError as e:
            logger.warning(f"Refresh token rejected: {e}")
            raise UnauthorizedError("Invalid refresh token") from e

        user = await self.repos.users.get_by_id(payload["sub"])
        if user is None or payload.get("tokenVersion") != user.token_version:
            raise UnauthorizedError("Invalid refresh token")

        logger.debug("Refresh token rotated", extra={"user_id": user.id})
        return user, self.issue_tokens(user)

    async def forgot_password(self, email: str) -> None:
        """Store a reset token for a local account; silent for unknown emails."""
        user = await self.repos.users.get_by_email(email)
        if user is None or not user.password_hash:
            logger.info("Password reset requested for unknown or OAuth-only account")
            return

        token, token_hash = generate_one_time_token()
        user.password_reset_token = token_hash
        user.password_reset_expires = utc_now() + timedelta(minutes=settings.security.password_reset_expire_minutes)
        await self.repos.users.update(user)
        logger.info(
            f"Password reset link for {user.email}: {settings.frontend_url}/auth/reset-password?token={token}",
            extra={"user_id": user.id},
        )

    async def reset_password(self, token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            BadRequestError: If the token is unknown or expired
        """
        user = await self.repos.users.get_by_reset_token(hash_one_time_token(token))
        if user is None or user.password_reset_expires is None or user.password_reset_expires < utc_now():
            raise BadRequestError("Invalid or expired reset token")

        user.password_hash = await run_in_threadpool(get_password_hash, new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        user.token_version += 1
        await self.repos.users.update(user)
        logger.info("Password reset completed", extra={"user_id": user.id})

    async def verify_email(self, token: str) -> User:
        """
        Mark the email behind a verification token as verified.

        Raises:
            BadRequestError: If the token is unknown
        """
        user = await self.repos.users.get_by_verification_token(hash_one_time_token(token))
        if user is None:
            raise BadRequestError("Invalid verification token")
        user.email_verified = True
        user.email_verification_token = None
        return await self.repos.users.update(user)

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Change the password of an authenticated local account.

        Raises:
            BadRequestError: For Google-only accounts or an unchanged password
            UnauthorizedError: If the current password is wrong
        """
        if not user.password_hash:
            raise BadRequestError("Cannot change password for Google accounts")
        if not await run_in_threadpool(verify_password, current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        if current_password == new_password:
            raise BadRequestError("New password must be different from the current password")

        user.password_hash = await run_in_threadpool(get_password_hash, new_password)
        user.token_version += 1
        await self.repos.users.update(user)
        logger.info("Password changed", extra={"user_id": user.id})

    # =====================================================================
    # Google accounts
    # =====================================================================

    async def authenticate_google(self, identity: GoogleIdentity) -> Tuple[User, TokenPair, bool]:
        """
        Sign in with a verified Google identity, creating the account if needed.

        An existing local account with the same email is linked to the Google
        identity instead of creating a duplicate.

        Returns:
            ``(user, tokens, is_new_user)``
        """
        user = await self.repos.users.get_by_provider_id(identity.subject)
        is_new = False
        if user is None:
            user = await self.repos.users.get_by_email(identity.email)
            if user is not None:
                user.provider_id = identity.subject
                if not user.password_hash:
                    user.provider = AuthProvider.GOOGLE
                user.email_verified = user.email_verified or identity.email_verified
                if not user.profile_image and identity.picture:
                    user.profile_image = identity.picture
            else:
                is_new = True
                user = User(
                    username=await self._unique_username(identity),
                    email=identity.email.lower(),
                    provider=AuthProvider.GOOGLE,
                    provider_id=identity.subject,
                    profile_image=identity.picture,
                    email_verified=identity.email_verified,
                )

        user.last_active_at = utc_now()
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)

        logger.info(
            f"Google sign-in for {user.username}",
            extra={"user_id": user.id, "new_user": is_new},
        )
        return user, self.issue_tokens(user), is_new

    async def link_google(self, user: User, identity: GoogleIdentity) -> User:
        """
        Attach a Google identity to an existing account.

        Raises:
            BadRequestError: If the Google email differs from the account email
            ConflictError: If the identity already belongs to another account
        """
        if identity.email.lower() != user.email.lower():
            raise BadRequestError("Google account email does not match your account email")
        owner = await self.repos.users.get_by_provider_id(identity.subject)
        if owner is not None and owner.id != user.id:
            raise ConflictError("This Google account is already linked to another user")

        user.provider_id = identity.subject
        user.email_verified = user.email_verified or identity.email_verified
        return await self.repos.users.update(user)

    async def _unique_username(self, identity: GoogleIdentity) -> str:
        base = _USERNAME_UNSAFE.sub("", (identity.name or identity.email.split("@")[0]).replace(" ", "_"))
        base = (base or "user")[:24]
        if len(base) < 3:
            base = f"{base}user"
        candidate = base
        while await self.repos.users.get_by_username(candidate):
            candidate = f"{base}_{random.randint(1000, 99999)}"
        return candidate
