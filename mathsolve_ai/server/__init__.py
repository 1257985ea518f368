"""
MathSolve AI Server Package.

This package contains the web server implementation for the MathSolve AI
platform.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    exception_handlers: Error envelope rendering.
    middleware: Request logging, sanitization and rate limiting.
    services: Business logic and request dependencies.
"""
