"""
Health Check Endpoints.

Basic system status endpoints (health, version, API index) used for
monitoring and deployment verification.
"""

from fastapi import APIRouter

from mathsolve_ai import __version__
from mathsolve_ai.server.core import constant
from mathsolve_ai.server.core.config import settings

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok", "environment": settings.environment}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": __version__}


@router.get(constant.API_PREFIX, summary="API Index", description="List the available API route groups.")
async def api_index():
    return {
        "success": True,
        "message": f"{constant.PROJECT_NAME} API",
        "version": __version__,
        "endpoints": {
            "auth": f"{constant.API_PREFIX}/auth",
            "users": f"{constant.API_PREFIX}/users",
            "problems": f"{constant.API_PREFIX}/problems",
            "resources": f"{constant.API_PREFIX}/resources",
            "docs": f"{constant.API_PREFIX}/docs",
        },
    }
