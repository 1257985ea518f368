"""
Problem Service.

Listing, search and CRUD of problems together with ratings, solution
submissions and comments. Quality scores are recomputed whenever content,
engagement or ratings change; deleting a problem removes its dependent rows
in the same transaction.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from mathsolve_ai.core.database.base import utc_now
from mathsolve_ai.core.database.entities.achievements import Achievement
from mathsolve_ai.core.database.entities.comments import Comment
from mathsolve_ai.core.database.entities.problems import Problem
from mathsolve_ai.core.database.entities.ratings import ProblemRating
from mathsolve_ai.core.database.entities.solutions import Solution
from mathsolve_ai.core.database.entities.users import User
from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.database.repositories.bundle import build_repos
from mathsolve_ai.core.errors import ForbiddenError, NotFoundError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.models.domain.enums import Difficulty, SortOrder
from mathsolve_ai.core.models.io.problems import (
    CategoryCount,
    CommentCreate,
    CommentRead,
    ProblemCounts,
    ProblemCreate,
    ProblemRead,
    ProblemUpdate,
    RatingRead,
    SolutionCreate,
    SolutionRead,
)
from mathsolve_ai.core.models.io.users import UserSummary

from . import scoring

logger = get_logger(__name__)

PROBLEM_SORT_COLUMNS = {
    "createdAt": Problem.created_at,
    "qualityScore": Problem.quality_score,
    "viewCount": Problem.view_count,
    "attemptCount": Problem.attempt_count,
    "title": Problem.title,
}

FIRST_SOLVE_ACHIEVEMENT = ("FIRST_SOLVE", "First Solve", "Solved your first problem")
FIRST_PROBLEM_ACHIEVEMENT = ("PROBLEM_CREATOR", "Problem Creator", "Published your first problem")


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma-separated ``tags`` query value into clean tags."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class ProblemService:
    """Problem operations bound to one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repos = build_repos(session)

    # =====================================================================
    # Presentation
    # =====================================================================

    async def _present_many(self, problems: Sequence[Problem]) -> List[ProblemRead]:
        ids = [problem.id for problem in problems]
        creators = await self.repos.users.get_many(problem.creator_id for problem in problems)
        averages = await self.repos.ratings.averages_for_problems(ids)
        rating_counts = await self.repos.ratings.count_by(ProblemRating.problem_id, ids)
        solution_counts = await self.repos.solutions.count_by(Solution.problem_id, ids)
        comment_counts = await self.repos.comments.count_by(Comment.problem_id, ids)

        return [
            self._present(
                problem,
                creator=creators.get(problem.creator_id),
                avg_rating=averages.get(problem.id, 0.0),
                counts=ProblemCounts(
                    ratings=rating_counts.get(problem.id, 0),
                    solutions=solution_counts.get(problem.id, 0),
                    comments=comment_counts.get(problem.id, 0),
                ),
            )
            for problem in problems
        ]

    @staticmethod
    def _present(
        problem: Problem,
        creator: Optional[User],
        avg_rating: float,
        counts: ProblemCounts,
        user_rating: Optional[int] = None,
    ) -> ProblemRead:
        return ProblemRead(
            id=problem.id,
            title=problem.title,
            description=problem.description,
            difficulty=problem.difficulty,
            category=problem.category,
            tags=problem.tag_list,
            solution=problem.solution,
            creator_id=problem.creator_id,
            creator=UserSummary.model_validate(creator) if creator is not None else None,
            quality_score=problem.quality_score,
            view_count=problem.view_count,
            attempt_count=problem.attempt_count,
            avg_rating=avg_rating,
            user_rating=user_rating,
            counts=counts,
            created_at=problem.created_at,
            updated_at=problem.updated_at,
        )

    async def present(self, problem: Problem, viewer: Optional[User] = None) -> ProblemRead:
        """Full detail view of a single problem."""
        creator = await self.repos.users.get_by_id(problem.creator_id)
        counts = ProblemCounts(
            ratings=await self.repos.ratings.count_for_problem(problem.id),
            solutions=await self.repos.solutions.count_for_problem(problem.id),
            comments=await self.repos.comments.count_for_problem(problem.id),
        )
        user_rating = None
        if viewer is not None:
            rating = await self.repos.ratings.get_for_user(problem.id, viewer.id)
            user_rating = rating.rating if rating is not None else None
        return self._present(
            problem,
            creator=creator,
            avg_rating=await self.repos.ratings.average_for_problem(problem.id),
            counts=counts,
            user_rating=user_rating,
        )

    # =====================================================================
    # Queries
    # =====================================================================

    async def list_problems(
        self,
        page: int,
        limit: int,
        category: Optional[str] = None,
        difficulty: Optional[Difficulty] = None,
        search: Optional[str] = None,
        tags: Sequence[str] = (),
        creator_id: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Page[ProblemRead]:
        stmt = self.repos.problems.build_query(
            category=category,
            difficulty=difficulty,
            search=search,
            tags=tags,
            creator_id=creator_id,
        )
        result = await self.repos.problems.find_page(
            stmt, page, limit, PROBLEM_SORT_COLUMNS[sort_by], descending=sort_order == SortOrder.DESC
        )
        return Page(items=await self._present_many(result.items), total=result.total, page=page, limit=limit)

    async def search_problems(self, query: str, page: int, limit: int) -> Page[ProblemRead]:
        """Title/description search ranked by quality score."""
        return await self.list_problems(page, limit, search=query, sort_by="qualityScore")

    async def categories(self, include_count: bool) -> List[CategoryCount] | List[str]:
        categories = await self.repos.problems.categories()
        if include_count:
            return [CategoryCount(category=category, count=count) for category, count in categories]
        return sorted(category for category, _ in categories)

    async def get_problem(self, problem_id: str) -> Problem:
        problem = await self.repos.problems.get_by_id(problem_id)
        if problem is None:
            raise NotFoundError("Problem not found")
        return problem

    async def view_problem(self, problem_id: str, viewer: Optional[User] = None) -> ProblemRead:
        """Record a view and return the problem detail with the new view count."""
        problem = await self.get_problem(problem_id)
        await self.repos.problems.increment_view_count(problem.id)
        await self.session.refresh(problem)
        return await self.present(problem, viewer)

    # =====================================================================
    # Commands
    # =====================================================================

    async def create_problem(self, creator: User, data: ProblemCreate) -> ProblemRead:
        problem = Problem(
            title=data.title,
            description=data.description,
            difficulty=data.difficulty,
            category=data.category,
            tags=json.dumps(data.tags),
            solution=data.solution or None,
            creator_id=creator.id,
            quality_score=scoring.initial_quality_score(data.title, data.description, data.tags, data.solution),
        )
        problem = await self.repos.problems.create(problem)
        await self._award_once(creator, *FIRST_PROBLEM_ACHIEVEMENT)
        logger.info(f"Problem created: {problem.title}", extra={"problem_id": problem.id, "creator_id": creator.id})
        return await self.present(problem, creator)

    def _ensure_creator(self, problem: Problem, user: User, action: str) -> None:
        if problem.creator_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this problem")

    async def update_problem(self, user: User, problem_id: str, data: ProblemUpdate) -> ProblemRead:
        """
        Partially update a problem owned by ``user`` and rescore it.

        Raises:
            NotFoundError: If the problem does not exist
            ForbiddenError: If ``user`` is not the creator
        """
        problem = await self.get_problem(problem_id)
        self._ensure_creator(problem, user, "update")

        update_data = data.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key != "solution":
                continue
            if key == "tags":
                value = json.dumps(value)
            elif key == "solution":
                value = value or None
            setattr(problem, key, value)

        problem.quality_score = self._engagement_score(problem)
        problem.updated_at = utc_now()
        problem = await self.repos.problems.update(problem)
        logger.info("Problem updated", extra={"problem_id": problem.id, "fields": sorted(update_data)})
        return await self.present(problem, user)

    async def delete_problem(self, user: User, problem_id: str) -> None:
        """
        Delete a problem with its ratings, solutions and comments atomically.

        Raises:
            NotFoundError: If the problem does not exist
            ForbiddenError: If ``user`` is not the creator
        """
        problem = await self.get_problem(problem_id)
        self._ensure_creator(problem, user, "delete")

        try:
            await self.repos.ratings.delete_for_problem(problem.id)
            await self.repos.solutions.delete_for_problem(problem.id)
            await self.repos.comments.delete_for_problem(problem.id)
            await self.repos.problems.delete_by_id(problem.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.error("Problem deletion rolled back", exc_info=True, extra={"problem_id": problem_id})
            raise
        logger.info("Problem deleted", extra={"problem_id": problem_id, "creator_id": user.id})

    async def list_by_creator(self, user: User, page: int, limit: int) -> Page[ProblemRead]:
        return await self.list_problems(page, limit, creator_id=user.id)

    @staticmethod
    def _engagement_score(problem: Problem) -> float:
        return scoring.engagement_quality_score(
            problem.title,
            problem.description,
            problem.tag_list,
            problem.solution,
            problem.view_count,
            problem.attempt_count,
        )

    async def rate_problem(self, user: User, problem_id: str, value: int) -> RatingRead:
        """
        Create or replace ``user``'s rating and rescore the problem.

        Raises:
            NotFoundError: If the problem does not exist
            ForbiddenError: When rating your own problem
        """
        problem = await self.get_problem(problem_id)
        if problem.creator_id == user.id:
            raise ForbiddenError("You cannot rate your own problem")

        rating = await self.repos.ratings.get_for_user(problem.id, user.id)
        if rating is None:
            rating = ProblemRating(problem_id=problem.id, user_id=user.id, rating=value)
        else:
            rating.rating = value
            rating.updated_at = utc_now()
        self.session.add(rating)
        await self.session.flush()

        avg_rating = await self.repos.ratings.average_for_problem(problem.id)
        problem.quality_score = scoring.rated_quality_score(self._engagement_score(problem), avg_rating)
        self.session.add(problem)
        await self.session.commit()
        await self.session.refresh(rating)

        logger.info("Problem rated", extra={"problem_id": problem.id, "user_id": user.id, "rating": value})
        return RatingRead(
            id=rating.id,
            problem_id=rating.problem_id,
            user_id=rating.user_id,
            rating=rating.rating,
            avg_rating=avg_rating,
            quality_score=problem.quality_score,
            created_at=rating.created_at,
            updated_at=rating.updated_at,
        )

    async def submit_solution(self, user: User, problem_id: str, data: SolutionCreate) -> SolutionRead:
        """
        Record an answer, award points on the first correct solve and update the rank.

        A problem without a stored solution cannot be auto-graded, so such
        submissions are recorded as incorrect.
        """
        problem = await self.get_problem(problem_id)
        is_correct = bool(problem.solution) and scoring.normalize_answer(data.answer) == scoring.normalize_answer(
            problem.solution or ""
        )

        solution = await self.repos.solutions.get_for_user(problem.id, user.id)
        already_solved = solution is not None and solution.is_correct
        points = scoring.solve_points(problem.difficulty.value, data.hints_used) if is_correct else 0
        if solution is None:
            solution = Solution(problem_id=problem.id, user_id=user.id, answer=data.answer)
        solution.answer = data.answer
        solution.time_spent = data.time_spent
        solution.hints_used = data.hints_used
        if not already_solved:
            solution.is_correct = is_correct
            solution.points_earned = points
            if is_correct:
                user.rank_points += points
                user.current_rank = scoring.rank_for_points(user.rank_points)
        user.last_active_at = utc_now()

        await self.repos.problems.increment_attempt_count(problem.id)
        self.session.add(solution)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(solution)
        await self.session.refresh(user)

        if is_correct and not already_solved:
            await self._award_once(user, *FIRST_SOLVE_ACHIEVEMENT)
        logger.info(
            "Solution submitted",
            extra={"problem_id": problem.id, "user_id": user.id, "correct": is_correct},
        )
        return SolutionRead(
            id=solution.id,
            problem_id=solution.problem_id,
            user_id=solution.user_id,
            answer=solution.answer,
            is_correct=is_correct,
            points_earned=points if is_correct and not already_solved else 0,
            time_spent=solution.time_spent,
            hints_used=solution.hints_used,
            created_at=solution.created_at,
            rank_points=user.rank_points,
            current_rank=user.current_rank,
        )

    async def _award_once(self, user: User, achievement_type: str, name: str, description: str) -> None:
        if await self.repos.achievements.has_type(user.id, achievement_type):
            return
        await self.repos.achievements.create(
            Achievement(user_id=user.id, type=achievement_type, name=name, description=description)
        )
        logger.info(f"Achievement earned: {achievement_type}", extra={"user_id": user.id})

    # =====================================================================
    # Comments
    # =====================================================================

    async def list_comments(self, problem_id: str, page: int, limit: int) -> Page[CommentRead]:
        await self.get_problem(problem_id)
        result = await self.repos.comments.page_for_problem(problem_id, page, limit)
        authors: Dict[str, User] = await self.repos.users.get_many(comment.user_id for comment in result.items)
        items = [self._present_comment(comment, authors.get(comment.user_id)) for comment in result.items]
        return Page(items=items, total=result.total, page=page, limit=limit)

    async def add_comment(self, user: User, problem_id: str, data: CommentCreate) -> CommentRead:
        await self.get_problem(problem_id)
        comment = await self.repos.comments.create(Comment(problem_id=problem_id, user_id=user.id, content=data.content))
        return self._present_comment(comment, user)

    @staticmethod
    def _present_comment(comment: Comment, author: Optional[User]) -> CommentRead:
        return CommentRead(
            id=comment.id,
            problem_id=comment.problem_id,
            content=comment.content,
            user=UserSummary.model_validate(author) if author is not None else None,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
