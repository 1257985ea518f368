"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request logging, input sanitization), registers the exception
handlers and includes all API routers.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mathsolve_ai import __version__
from mathsolve_ai.core.database import init_db
from mathsolve_ai.core.logging_config import get_logger, setup_logging
from mathsolve_ai.core.monitoring import initialize_logfire

from .api import auth, google_auth, health, problems, resources, users
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware, SanitizationMiddleware, sanitize_path_params
from .middleware.rate_limit import general_limit

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Ensures the database schema on startup.
    """
    try:
        logger.info(f"Starting up {constant.PROJECT_NAME} Server ({settings.environment})...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info(f"Shutting down {constant.PROJECT_NAME} Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    MathSolve AI Server API

    Backend services for the MathSolve AI learning platform: accounts and Google
    sign-in, user profiles and follows, math problems with ratings, solutions and
    comments, and learning resources with bookmarks.
    """,
    version=__version__,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

setup_exception_handlers(app)

# Last added runs first: CORS, then logging, then sanitization
app.add_middleware(SanitizationMiddleware)
app.add_middleware(RequestLoggingMiddleware)
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

api_dependencies = [Depends(general_limit), Depends(sanitize_path_params)]

app.include_router(health.router, tags=["health"])
app.include_router(
    auth.router, prefix=f"{constant.API_PREFIX}/auth", tags=["auth"], dependencies=api_dependencies
)
app.include_router(
    google_auth.router,
    prefix=f"{constant.API_PREFIX}/auth/google",
    tags=["google-auth"],
    dependencies=api_dependencies,
)
app.include_router(
    users.router, prefix=f"{constant.API_PREFIX}/users", tags=["users"], dependencies=api_dependencies
)
app.include_router(
    problems.router, prefix=f"{constant.API_PREFIX}/problems", tags=["problems"], dependencies=api_dependencies
)
app.include_router(
    resources.router, prefix=f"{constant.API_PREFIX}/resources", tags=["resources"], dependencies=api_dependencies
)

upload_dir = Path(settings.uploads.directory)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

initialize_logfire(app)
