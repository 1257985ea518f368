"""
HTTP middleware and request guards.

Request logging, input sanitization and per-IP rate limiting.
"""

from .rate_limit import RateLimit, reset_rate_limits
from .request_logging import RequestLoggingMiddleware
from .sanitization import SanitizationMiddleware, sanitize_path_params

__all__ = [
    "RateLimit",
    "RequestLoggingMiddleware",
    "SanitizationMiddleware",
    "reset_rate_limits",
    "sanitize_path_params",
]
