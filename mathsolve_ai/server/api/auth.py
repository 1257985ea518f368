"""
Authentication Endpoints.

Local account registration and login, refresh-token rotation through the
``refreshToken`` cookie, password recovery and email verification.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Cookie, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from mathsolve_ai.core.errors import UnauthorizedError
from mathsolve_ai.core.models.io.auth import (
    AuthPayload,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenPayload,
)
from mathsolve_ai.core.models.io.common import ApiResponse, MessageResponse, error_body, success
from mathsolve_ai.core.models.io.users import UserRead
from mathsolve_ai.server.core.constant import REFRESH_COOKIE_NAME
from mathsolve_ai.server.middleware.rate_limit import auth_limit
from mathsolve_ai.server.services.deps import AuthServiceDep, CurrentUser

from .cookies import clear_refresh_cookie, set_refresh_cookie

router = APIRouter()

RefreshCookie = Annotated[Optional[str], Cookie(alias=REFRESH_COOKIE_NAME)]


@router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a local account, sign it in and set the refresh cookie.",
    responses={409: {"description": "Email or username already registered"}},
    dependencies=[Depends(auth_limit)],
)
async def register(data: RegisterRequest, response: Response, service: AuthServiceDep):
    user, tokens = await service.register(data)
    set_refresh_cookie(response, tokens.refresh_token)
    return success(
        AuthPayload(user=UserRead.model_validate(user), access_token=tokens.access_token),
        "User registered successfully",
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthPayload],
    summary="Login",
    description="Authenticate with email and password.",
    responses={401: {"description": "Invalid email or password"}},
    dependencies=[Depends(auth_limit)],
)
async def login(data: LoginRequest, response: Response, service: AuthServiceDep):
    user, tokens = await service.login(data.email, data.password)
    set_refresh_cookie(response, tokens.refresh_token)
    return success(
        AuthPayload(user=UserRead.model_validate(user), access_token=tokens.access_token),
        "Login successful",
    )


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(response: Response):
    """Clear the refresh cookie. Access tokens simply expire."""
    clear_refresh_cookie(response)
    return MessageResponse(message="Logout successful")


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenPayload],
    summary="Refresh Access Token",
    description="Exchange the refresh cookie (or a refreshToken body field) for a new access token.",
    responses={401: {"description": "Missing, invalid, expired or revoked refresh token"}},
)
async def refresh(
    response: Response,
    service: AuthServiceDep,
    refresh_cookie: RefreshCookie = None,
    data: Optional[RefreshRequest] = None,
):
    token = refresh_cookie or (data.refresh_token if data else None)
    try:
        _, tokens = await service.refresh(token)
    except UnauthorizedError as e:
        rejected = JSONResponse(status_code=e.status_code, content=error_body(e.message))
        clear_refresh_cookie(rejected)
        return rejected

    set_refresh_cookie(response, tokens.refresh_token)
    return success(TokenPayload(access_token=tokens.access_token), "Token refreshed successfully")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Forgot Password",
    dependencies=[Depends(auth_limit)],
)
async def forgot_password(data: ForgotPasswordRequest, service: AuthServiceDep):
    """
    Start password recovery.

    Always reports success so the endpoint cannot be used to probe for accounts.
    """
    await service.forgot_password(data.email)
    return MessageResponse(message="If an account with that email exists, a password reset link has been sent")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset Password",
    responses={400: {"description": "Invalid or expired reset token"}},
    dependencies=[Depends(auth_limit)],
)
async def reset_password(data: ResetPasswordRequest, service: AuthServiceDep):
    await service.reset_password(data.token, data.password)
    return MessageResponse(message="Password reset successful")


@router.get(
    "/verify-email",
    response_model=ApiResponse[UserRead],
    summary="Verify Email",
    responses={400: {"description": "Invalid verification token"}},
)
async def verify_email(service: AuthServiceDep, token: str = Query(min_length=1)):
    user = await service.verify_email(token)
    return success(UserRead.model_validate(user), "Email verified successfully")


@router.get("/profile", response_model=ApiResponse[UserRead], summary="Current User")
async def profile(user: CurrentUser):
    return success(UserRead.model_validate(user))


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    responses={401: {"description": "Current password is incorrect"}},
)
async def change_password(data: ChangePasswordRequest, user: CurrentUser, service: AuthServiceDep):
    await service.change_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")
