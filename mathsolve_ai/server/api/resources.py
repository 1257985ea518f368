"""
Learning Resource Endpoints.

Browsing, searching and authoring tutorials, guides and references, their
statistics, and the signed-in user's bookmarks.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.models.domain.enums import Difficulty, ResourceType, SortOrder
from mathsolve_ai.core.models.io.common import ApiResponse, MessageResponse, PaginationMeta, success
from mathsolve_ai.core.models.io.resources import (
    BookmarkRead,
    ResourceCreate,
    ResourceListPayload,
    ResourceRead,
    ResourceStats,
    ResourceUpdate,
)
from mathsolve_ai.server.core.constant import (
    RESOURCE_DEFAULT_LIMIT,
    RESOURCE_MAX_LIMIT,
    RESOURCE_SEARCH_MAX_LIMIT,
    SEARCH_MAX_LENGTH,
)
from mathsolve_ai.server.middleware.rate_limit import bookmark_limit, resource_create_limit, search_limit
from mathsolve_ai.server.services.deps import CurrentUser, OptionalUser, ResourceServiceDep

router = APIRouter()

ResourceSortField = Literal["createdAt", "viewCount", "rating", "title"]
PageQuery = Query(default=1, ge=1)
LimitQuery = Query(default=RESOURCE_DEFAULT_LIMIT, ge=1, le=RESOURCE_MAX_LIMIT)


def _resource_list(page: Page[ResourceRead]) -> ResourceListPayload:
    return ResourceListPayload(resources=page.items, pagination=PaginationMeta.from_page(page))


@router.get(
    "",
    response_model=ApiResponse[ResourceListPayload],
    summary="List Resources",
    description="Paginated resource listing with category, type, difficulty, author and text filters.",
)
async def list_resources(
    service: ResourceServiceDep,
    page: int = PageQuery,
    limit: int = LimitQuery,
    category: Optional[str] = Query(default=None),
    type: Optional[ResourceType] = Query(default=None),
    difficulty: Optional[Difficulty] = Query(default=None),
    author_id: Optional[str] = Query(default=None, alias="authorId"),
    search: Optional[str] = Query(default=None, max_length=SEARCH_MAX_LENGTH),
    sort_by: ResourceSortField = Query(default="createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.DESC, alias="sortOrder"),
):
    result = await service.list_resources(
        page,
        limit,
        category=category or None,
        type=type,
        difficulty=difficulty,
        author_id=author_id or None,
        search=search or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success(_resource_list(result))


@router.get(
    "/search",
    response_model=ApiResponse[ResourceListPayload],
    summary="Search Resources",
    dependencies=[Depends(search_limit)],
)
async def search_resources(
    service: ResourceServiceDep,
    query: str = Query(min_length=1, max_length=SEARCH_MAX_LENGTH),
    page: int = PageQuery,
    limit: int = Query(default=RESOURCE_DEFAULT_LIMIT, ge=1, le=RESOURCE_SEARCH_MAX_LIMIT),
):
    return success(_resource_list(await service.list_resources(page, limit, search=query)))


@router.get("/category/{category}", response_model=ApiResponse[ResourceListPayload], summary="Resources by Category")
async def resources_by_category(
    category: str,
    service: ResourceServiceDep,
    page: int = PageQuery,
    limit: int = LimitQuery,
):
    return success(_resource_list(await service.list_resources(page, limit, category=category)))


@router.get("/type/{resource_type}", response_model=ApiResponse[ResourceListPayload], summary="Resources by Type")
async def resources_by_type(
    resource_type: ResourceType,
    service: ResourceServiceDep,
    page: int = PageQuery,
    limit: int = LimitQuery,
):
    return success(_resource_list(await service.list_resources(page, limit, type=resource_type)))


@router.get("/stats", response_model=ApiResponse[ResourceStats], summary="Resource Statistics")
async def resource_stats(service: ResourceServiceDep):
    return success(await service.stats())


@router.get("/bookmarks", response_model=ApiResponse[ResourceListPayload], summary="My Bookmarks")
async def my_bookmarks(user: CurrentUser, service: ResourceServiceDep, page: int = PageQuery, limit: int = LimitQuery):
    return success(_resource_list(await service.bookmarked(user, page, limit)))


@router.get(
    "/{resource_id}",
    response_model=ApiResponse[ResourceRead],
    summary="Get Resource",
    description="Fetch one resource and count the view.",
    responses={404: {"description": "Resource not found"}},
)
async def get_resource(resource_id: str, viewer: OptionalUser, service: ResourceServiceDep):
    return success(await service.view_resource(resource_id, viewer))


@router.post(
    "",
    response_model=ApiResponse[ResourceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Resource",
    dependencies=[Depends(resource_create_limit)],
)
async def create_resource(data: ResourceCreate, user: CurrentUser, service: ResourceServiceDep):
    return success(await service.create_resource(user, data), "Resource created successfully")


@router.put(
    "/{resource_id}",
    response_model=ApiResponse[ResourceRead],
    summary="Update Resource",
    responses={403: {"description": "Not the author"}, 404: {"description": "Resource not found"}},
)
async def update_resource(resource_id: str, data: ResourceUpdate, user: CurrentUser, service: ResourceServiceDep):
    return success(await service.update_resource(user, resource_id, data), "Resource updated successfully")


@router.delete(
    "/{resource_id}",
    response_model=MessageResponse,
    summary="Delete Resource",
    responses={403: {"description": "Not the author"}, 404: {"description": "Resource not found"}},
)
async def delete_resource(resource_id: str, user: CurrentUser, service: ResourceServiceDep):
    await service.delete_resource(user, resource_id)
    return MessageResponse(message="Resource deleted successfully")


@router.post(
    "/{resource_id}/bookmark",
    response_model=ApiResponse[BookmarkRead],
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark Resource",
    responses={404: {"description": "Resource not found"}, 409: {"description": "Already bookmarked"}},
    dependencies=[Depends(bookmark_limit)],
)
async def bookmark_resource(resource_id: str, user: CurrentUser, service: ResourceServiceDep):
    return success(await service.bookmark(user, resource_id), "Resource bookmarked successfully")


@router.delete(
    "/{resource_id}/bookmark",
    response_model=MessageResponse,
    summary="Remove Bookmark",
    responses={404: {"description": "Bookmark not found"}},
    dependencies=[Depends(bookmark_limit)],
)
async def remove_bookmark(resource_id: str, user: CurrentUser, service: ResourceServiceDep):
    await service.remove_bookmark(user, resource_id)
    return MessageResponse(message="Bookmark removed successfully")
