"""
Problem Endpoints.

Browsing, searching and authoring problems plus ratings, solution
submissions and comments. Static paths are registered before ``/{problem_id}``
so they are not captured as ids.
"""

from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, status

from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.models.domain.enums import Difficulty, SortOrder
from mathsolve_ai.core.models.io.common import ApiResponse, MessageResponse, PaginationMeta, success
from mathsolve_ai.core.models.io.problems import (
    CategoryCount,
    CommentCreate,
    CommentListPayload,
    CommentRead,
    ProblemCreate,
    ProblemListPayload,
    ProblemRead,
    ProblemUpdate,
    RatingCreate,
    RatingRead,
    SolutionCreate,
    SolutionRead,
)
from mathsolve_ai.server.core.constant import PROBLEM_DEFAULT_LIMIT, PROBLEM_MAX_LIMIT, SEARCH_MAX_LENGTH
from mathsolve_ai.server.middleware.rate_limit import problem_create_limit, rating_limit, search_limit
from mathsolve_ai.server.services.deps import CurrentUser, OptionalUser, ProblemServiceDep
from mathsolve_ai.server.services.problems import parse_tags

router = APIRouter()

ProblemSortField = Literal["createdAt", "qualityScore", "viewCount", "attemptCount", "title"]


def _clamp(limit: int) -> int:
    return min(limit, PROBLEM_MAX_LIMIT)


def _problem_list(page: Page[ProblemRead]) -> ProblemListPayload:
    return ProblemListPayload(problems=page.items, pagination=PaginationMeta.from_page(page))


@router.get(
    "",
    response_model=ApiResponse[ProblemListPayload],
    summary="List Problems",
    description="Paginated problem listing with category, difficulty, text, tag and creator filters.",
)
async def list_problems(
    service: ProblemServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=PROBLEM_DEFAULT_LIMIT, ge=1),
    category: Optional[str] = Query(default=None),
    difficulty: Optional[Difficulty] = Query(default=None),
    search: Optional[str] = Query(default=None, max_length=SEARCH_MAX_LENGTH),
    tags: Optional[str] = Query(default=None, description="Comma separated; every tag must match"),
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    sort_by: ProblemSortField = Query(default="createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(default=SortOrder.DESC, alias="sortOrder"),
):
    result = await service.list_problems(
        page,
        _clamp(limit),
        category=category or None,
        difficulty=difficulty,
        search=search or None,
        tags=parse_tags(tags),
        creator_id=creator_id or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success(_problem_list(result))


@router.get(
    "/search",
    response_model=ApiResponse[ProblemListPayload],
    summary="Search Problems",
    description="Search titles and descriptions, best quality first.",
    dependencies=[Depends(search_limit)],
)
async def search_problems(
    service: ProblemServiceDep,
    q: str = Query(min_length=1, max_length=SEARCH_MAX_LENGTH),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=PROBLEM_DEFAULT_LIMIT, ge=1),
):
    return success(_problem_list(await service.search_problems(q, page, _clamp(limit))))


@router.get(
    "/categories",
    response_model=ApiResponse[Union[List[CategoryCount], List[str]]],
    summary="Problem Categories",
)
async def list_categories(
    service: ProblemServiceDep,
    include_count: bool = Query(default=False, alias="includeCount"),
):
    return success(await service.categories(include_count))


@router.get("/my", response_model=ApiResponse[ProblemListPayload], summary="My Problems")
async def my_problems(
    user: CurrentUser,
    service: ProblemServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=PROBLEM_DEFAULT_LIMIT, ge=1),
):
    return success(_problem_list(await service.list_by_creator(user, page, _clamp(limit))))


@router.get(
    "/{problem_id}",
    response_model=ApiResponse[ProblemRead],
    summary="Get Problem",
    description="Fetch one problem and count the view.",
    responses={404: {"description": "Problem not found"}},
)
async def get_problem(problem_id: str, viewer: OptionalUser, service: ProblemServiceDep):
    return success(await service.view_problem(problem_id, viewer))


@router.post(
    "",
    response_model=ApiResponse[ProblemRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create Problem",
    dependencies=[Depends(problem_create_limit)],
)
async def create_problem(data: ProblemCreate, user: CurrentUser, service: ProblemServiceDep):
    return success(await service.create_problem(user, data), "Problem created successfully")


@router.put(
    "/{problem_id}",
    response_model=ApiResponse[ProblemRead],
    summary="Update Problem",
    responses={403: {"description": "Not the creator"}, 404: {"description": "Problem not found"}},
)
async def update_problem(problem_id: str, data: ProblemUpdate, user: CurrentUser, service: ProblemServiceDep):
    return success(await service.update_problem(user, problem_id, data), "Problem updated successfully")


@router.delete(
    "/{problem_id}",
    response_model=MessageResponse,
    summary="Delete Problem",
    responses={403: {"description": "Not the creator"}, 404: {"description": "Problem not found"}},
)
async def delete_problem(problem_id: str, user: CurrentUser, service: ProblemServiceDep):
    await service.delete_problem(user, problem_id)
    return MessageResponse(message="Problem deleted successfully")


@router.post(
    "/{problem_id}/rate",
    response_model=ApiResponse[RatingRead],
    summary="Rate Problem",
    responses={403: {"description": "Cannot rate your own problem"}},
    dependencies=[Depends(rating_limit)],
)
async def rate_problem(problem_id: str, data: RatingCreate, user: CurrentUser, service: ProblemServiceDep):
    return success(await service.rate_problem(user, problem_id, data.rating), "Rating submitted successfully")


@router.post(
    "/{problem_id}/solutions",
    response_model=ApiResponse[SolutionRead],
    status_code=status.HTTP_201_CREATED,
    summary="Submit Solution",
)
async def submit_solution(problem_id: str, data: SolutionCreate, user: CurrentUser, service: ProblemServiceDep):
    result = await service.submit_solution(user, problem_id, data)
    return success(result, "Correct answer!" if result.is_correct else "Incorrect answer, try again")


@router.get("/{problem_id}/comments", response_model=ApiResponse[CommentListPayload], summary="List Comments")
async def list_comments(
    problem_id: str,
    service: ProblemServiceDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=PROBLEM_DEFAULT_LIMIT, ge=1),
):
    result = await service.list_comments(problem_id, page, _clamp(limit))
    return success(CommentListPayload(comments=result.items, pagination=PaginationMeta.from_page(result)))


@router.post(
    "/{problem_id}/comments",
    response_model=ApiResponse[CommentRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add Comment",
)
async def add_comment(problem_id: str, data: CommentCreate, user: CurrentUser, service: ProblemServiceDep):
    return success(await service.add_comment(user, problem_id, data), "Comment added successfully")
