"""
Global Exception Handlers for the FastAPI Application.

Domain errors, request validation failures, database constraint violations,
token errors and anything unhandled are all rendered as the error envelope.
Unhandled exceptions are logged with an error ID that is also returned to
the client for reference.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mathsolve_ai.core.errors import ApiError, RateLimitExceededError
from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.models.io.common import error_body

logger = get_logger(__name__)


def _field_name(loc) -> str:
    # drop the "body"/"query"/"path" prefix FastAPI adds
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    body = error_body(exc.message, exc.errors)
    headers = None
    if isinstance(exc, RateLimitExceededError):
        body["retryAfter"] = exc.retry_after
        headers = {"Retry-After": str(exc.retry_after)}
    if exc.status_code >= 500:
        logger.error(f"API error in {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    logger.debug(f"Validation failed for {request.method} {request.url.path}", extra={"errors": errors})
    return JSONResponse(status_code=400, content=error_body("Validation failed", errors))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error in {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=400, content=error_body("Duplicate field value entered"))


async def jwt_error_handler(request: Request, exc: JWTError) -> JSONResponse:
    return JSONResponse(status_code=401, content=error_body("Invalid token"))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception with its request context.

    Returns:
        JSONResponse: 500 error envelope carrying an error ID the client can report
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    body = error_body("Internal server error")
    body["errorId"] = error_id
    body["errorType"] = type(exc).__name__
    return JSONResponse(status_code=500, content=body)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(JWTError, jwt_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
