"""
Google OAuth Endpoints.

Consent URL generation, sign-in through an authorization code or an ID
token, and linking a Google identity to the signed-in account.
"""

from fastapi import APIRouter, Depends, Response

from mathsolve_ai.core.errors import BadRequestError
from mathsolve_ai.core.models.io.auth import GoogleAuthPayload, GoogleCodeRequest, GoogleTokenRequest, GoogleUrlPayload
from mathsolve_ai.core.models.io.common import ApiResponse, success
from mathsolve_ai.core.models.io.users import UserRead
from mathsolve_ai.server.middleware.rate_limit import auth_limit
from mathsolve_ai.server.services.auth import AuthService
from mathsolve_ai.server.services.deps import AuthServiceDep, CurrentUser, GoogleClientDep
from mathsolve_ai.server.services.google_oauth import GoogleIdentity

from .cookies import set_refresh_cookie

router = APIRouter()


async def _sign_in(identity: GoogleIdentity, response: Response, service: AuthService) -> ApiResponse:
    user, tokens, is_new = await service.authenticate_google(identity)
    set_refresh_cookie(response, tokens.refresh_token)
    return success(
        GoogleAuthPayload(user=UserRead.model_validate(user), access_token=tokens.access_token, is_new_user=is_new),
        "Google authentication successful",
    )


@router.get(
    "/url",
    response_model=ApiResponse[GoogleUrlPayload],
    summary="Google Consent URL",
    description="Build the Google consent-screen URL the frontend redirects to.",
    responses={500: {"description": "Google OAuth is not configured"}},
)
async def google_url(client: GoogleClientDep):
    url, state = client.build_auth_url()
    return success(GoogleUrlPayload(url=url, state=state))


@router.post(
    "/callback",
    response_model=ApiResponse[GoogleAuthPayload],
    summary="Google Callback",
    description="Sign in with the authorization code Google redirected back with.",
    dependencies=[Depends(auth_limit)],
)
async def google_callback(
    data: GoogleCodeRequest, response: Response, client: GoogleClientDep, service: AuthServiceDep
):
    if not data.code:
        raise BadRequestError("Authorization code is required")
    identity = await client.exchange_code(data.code)
    return await _sign_in(identity, response, service)


@router.post(
    "/token",
    response_model=ApiResponse[GoogleAuthPayload],
    summary="Google ID Token Sign-in",
    description="Sign in with a Google ID token obtained client-side.",
    dependencies=[Depends(auth_limit)],
)
async def google_token(
    data: GoogleTokenRequest, response: Response, client: GoogleClientDep, service: AuthServiceDep
):
    if not data.token:
        raise BadRequestError("Google token is required")
    identity = await client.verify_id_token(data.token)
    return await _sign_in(identity, response, service)


@router.post(
    "/link",
    response_model=ApiResponse[UserRead],
    summary="Link Google Account",
    responses={
        400: {"description": "Google email does not match the account email"},
        409: {"description": "Google account already linked to another user"},
    },
)
async def link_google(data: GoogleTokenRequest, user: CurrentUser, client: GoogleClientDep, service: AuthServiceDep):
    if not data.token:
        raise BadRequestError("Google token is required")
    identity = await client.verify_id_token(data.token)
    user = await service.link_google(user, identity)
    return success(UserRead.model_validate(user), "Google account linked successfully")
