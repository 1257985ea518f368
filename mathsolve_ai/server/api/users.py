"""
User Endpoints.

User search, the signed-in user's profile and avatar, public profiles,
statistics and the follower graph.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.models.domain.enums import SortOrder
from mathsolve_ai.core.models.io.common import ApiResponse, MessageResponse, PaginationMeta, success
from mathsolve_ai.core.models.io.users import (
    AchievementRead,
    AvatarPayload,
    UserListItem,
    UserListPayload,
    UserProfileUpdate,
    UserPublic,
    UserRead,
    UserStats,
)
from mathsolve_ai.server.core.constant import SEARCH_MAX_LENGTH, USER_DEFAULT_LIMIT, USER_MAX_LIMIT
from mathsolve_ai.server.middleware.rate_limit import follow_limit, search_limit
from mathsolve_ai.server.services.deps import CurrentUser, OptionalUser, UserServiceDep

router = APIRouter()


def _user_list(page: Page) -> UserListPayload:
    return UserListPayload(
        users=[UserListItem.model_validate(user) for user in page.items],
        pagination=PaginationMeta.from_page(page),
    )


@router.get(
    "/search",
    response_model=ApiResponse[UserListPayload],
    summary="Search Users",
    description="Case-insensitive substring search over usernames and emails.",
    dependencies=[Depends(search_limit)],
)
async def search_users(
    service: UserServiceDep,
    search_term: Optional[str] = Query(default=None, alias="searchTerm", max_length=SEARCH_MAX_LENGTH),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=USER_DEFAULT_LIMIT, ge=1, le=USER_MAX_LIMIT),
    sort_by: Literal["username", "rankPoints", "createdAt"] = Query(default="username", alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.ASC, alias="sortOrder"),
):
    result = await service.search_users(search_term, page, limit, sort_by, sort_order)
    return success(_user_list(result))


@router.get("/profile/me", response_model=ApiResponse[UserRead], summary="My Profile")
async def my_profile(user: CurrentUser):
    return success(UserRead.model_validate(user))


@router.put(
    "/profile/me",
    response_model=ApiResponse[UserRead],
    summary="Update My Profile",
    responses={400: {"description": "Username already taken or invalid field"}},
)
async def update_my_profile(data: UserProfileUpdate, user: CurrentUser, service: UserServiceDep):
    user = await service.update_profile(user, data)
    return success(UserRead.model_validate(user), "Profile updated successfully")


@router.post(
    "/profile/avatar",
    response_model=ApiResponse[AvatarPayload],
    summary="Upload Avatar",
    description="Upload a JPEG, PNG, WebP or GIF image as the profile picture.",
)
async def upload_avatar(user: CurrentUser, service: UserServiceDep, avatar: UploadFile = File(...)):
    payload = await avatar.read()
    user = await service.save_avatar(user, avatar.content_type, payload)
    return success(
        AvatarPayload(profile_image=user.profile_image, user=UserRead.model_validate(user)),
        "Avatar uploaded successfully",
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[UserPublic],
    summary="Public Profile",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, viewer: OptionalUser, service: UserServiceDep):
    return success(await service.get_public_profile(user_id, viewer))


@router.get("/{user_id}/stats", response_model=ApiResponse[UserStats], summary="User Statistics")
async def get_user_stats(user_id: str, service: UserServiceDep):
    return success(await service.get_stats(user_id))


@router.get("/{user_id}/achievements", response_model=ApiResponse[list[AchievementRead]], summary="User Achievements")
async def get_user_achievements(user_id: str, service: UserServiceDep):
    return success(await service.achievements(user_id))


@router.post(
    "/{user_id}/follow",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Follow User",
    responses={
        400: {"description": "Cannot follow yourself"},
        404: {"description": "User not found"},
        409: {"description": "Already following"},
    },
    dependencies=[Depends(follow_limit)],
)
async def follow_user(user_id: str, user: CurrentUser, service: UserServiceDep):
    await service.follow(user, user_id)
    return MessageResponse(message="User followed successfully")


@router.delete(
    "/{user_id}/follow",
    response_model=MessageResponse,
    summary="Unfollow User",
    dependencies=[Depends(follow_limit)],
)
async def unfollow_user(user_id: str, user: CurrentUser, service: UserServiceDep):
    await service.unfollow(user, user_id)
    return MessageResponse(message="User unfollowed successfully")


@router.get("/{user_id}/followers", response_model=ApiResponse[UserListPayload], summary="Followers")
async def get_followers(
    user_id: str,
    service: UserServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=USER_DEFAULT_LIMIT, ge=1, le=USER_MAX_LIMIT),
):
    return success(_user_list(await service.followers(user_id, page, limit)))


@router.get("/{user_id}/following", response_model=ApiResponse[UserListPayload], summary="Following")
async def get_following(
    user_id: str,
    service: UserServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=USER_DEFAULT_LIMIT, ge=1, le=USER_MAX_LIMIT),
):
    return success(_user_list(await service.following(user_id, page, limit)))
