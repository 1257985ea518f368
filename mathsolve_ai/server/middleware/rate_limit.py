"""
Rate Limiting Dependencies.

Fixed-window request budgets per client IP, backed by the ``limits``
library's in-memory async storage. Each ``RateLimit`` instance is a FastAPI
dependency; attach it to a route or a router to enforce its budget.
"""

from __future__ import annotations

import time

from fastapi import Request
from limits import parse
from limits.aio.storage import MemoryStorage
from limits.aio.strategies import FixedWindowRateLimiter

from mathsolve_ai.core.errors import RateLimitExceededError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.server.core.config import settings
from mathsolve_ai.server.core.constant import RATE_LIMITS

logger = get_logger(__name__)

storage = MemoryStorage()
limiter = FixedWindowRateLimiter(storage)


def client_key(request: Request) -> str:
    """Identify the caller by the first X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimit:
    """FastAPI dependency enforcing one named request budget."""

    def __init__(self, scope: str, message: str) -> None:
        self.scope = scope
        self.item = parse(RATE_LIMITS[scope])
        self.message = message

    async def __call__(self, request: Request) -> None:
        if not settings.rate_limit_enabled:
            return
        key = client_key(request)
        if await limiter.hit(self.item, self.scope, key):
            return

        reset_time = (await limiter.get_window_stats(self.item, self.scope, key))[0]
        retry_after = max(int(reset_time - time.time()), 1)
        logger.warning(
            f"Rate limit exceeded for scope {self.scope}",
            extra={"client": key, "path": request.url.path, "retry_after": retry_after},
        )
        raise RateLimitExceededError(self.message, retry_after=retry_after)


async def reset_rate_limits() -> None:
    """Forget every recorded hit."""
    await storage.reset()


general_limit = RateLimit("general", "Too many requests from this IP, please try again later.")
auth_limit = RateLimit("auth", "Too many authentication attempts, please try again later.")
problem_create_limit = RateLimit("problem_create", "Too many problems created, please try again later.")
rating_limit = RateLimit("rating", "Too many ratings submitted, please try again later.")
search_limit = RateLimit("search", "Too many search requests, please try again later.")
resource_create_limit = RateLimit("resource_create", "Too many resources created, please try again later.")
bookmark_limit = RateLimit("bookmark", "Too many bookmark operations, please try again later.")
follow_limit = RateLimit("follow", "Too many follow operations, please try again later.")
