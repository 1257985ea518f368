"""
Request Dependencies.

Authentication dependencies resolve the bearer access token to a ``User``;
service providers bind each service to the request's database session.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from mathsolve_ai.core.database import get_session
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.users import UserRepository
from mathsolve_ai.core.errors import UnauthorizedError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.security import decode_access_token

from .auth import AuthService
from .google_oauth import GoogleOAuthClient, get_google_client
from .problems import ProblemService
from .resources import ResourceService
from .users import UserService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Resolve the authenticated user from the ``Authorization: Bearer`` header.

    Raises:
        UnauthorizedError: If the token is missing, expired, invalid or its user is gone
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")
    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError as e:
        raise UnauthorizedError("Access token expired") from e
    except JWTError as e:
        raise UnauthorizedError("Invalid access token") from e

    user = await UserRepository(session).get_by_id(payload["sub"])
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def get_optional_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """Like ``get_current_user`` but anonymous (``None``) when no valid token is sent."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        logger.debug("Ignoring invalid access token on optional-auth route")
        return None
    return await UserRepository(session).get_by_id(payload["sub"])


def get_auth_service(session: SessionDep) -> AuthService:
    return AuthService(session)


def get_user_service(session: SessionDep) -> UserService:
    return UserService(session)


def get_problem_service(session: SessionDep) -> ProblemService:
    return ProblemService(session)


def get_resource_service(session: SessionDep) -> ResourceService:
    return ResourceService(session)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ProblemServiceDep = Annotated[ProblemService, Depends(get_problem_service)]
ResourceServiceDep = Annotated[ResourceService, Depends(get_resource_service)]
GoogleClientDep = Annotated[GoogleOAuthClient, Depends(get_google_client)]
