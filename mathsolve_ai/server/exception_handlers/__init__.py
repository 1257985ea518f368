"""
Exception handlers for the MathSolve AI server.

Every error leaves the API in the ``{"success": false, "message": ...}``
envelope; ``setup_exception_handlers`` registers them with the application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
