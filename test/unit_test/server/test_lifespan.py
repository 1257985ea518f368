"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup ensures the database schema, that failures are
logged rather than aborting startup, and that shutdown is logged.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from mathsolve_ai.core.database import session as db_session
from mathsolve_ai.server.core.config import settings
from mathsolve_ai.server.main import app as main_app
from mathsolve_ai.server.main import lifespan

MAIN = "mathsolve_ai.server.main"


class TestLifespan:
    async def test_startup_initializes_database(self):
        with patch(f"{MAIN}.init_db", new_callable=AsyncMock) as mock_init_db, patch(f"{MAIN}.logger") as mock_logger:
            async with lifespan(FastAPI()):
                mock_init_db.assert_awaited_once()

        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert any("Starting up" in message for message in messages)
        assert any("Database initialized successfully" in message for message in messages)
        assert any("Shutting down" in message for message in messages)

    async def test_startup_survives_database_failure(self):
        with patch(f"{MAIN}.init_db", new_callable=AsyncMock) as mock_init_db, patch(f"{MAIN}.logger") as mock_logger:
            mock_init_db.side_effect = Exception("Database connection failed")
            async with lifespan(FastAPI()):
                pass

        mock_logger.error.assert_called_once()
        assert "Database initialization failed" in mock_logger.error.call_args.args[0]


class TestInitDb:
    async def test_skips_when_auto_create_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "database_auto_create", False)
        with patch.object(db_session, "create_all", new_callable=AsyncMock) as mock_create_all:
            await db_session.init_db()
        mock_create_all.assert_not_awaited()

    async def test_creates_tables_when_enabled(self, monkeypatch):
        monkeypatch.setattr(settings, "database_auto_create", True)
        with patch.object(db_session, "create_all", new_callable=AsyncMock) as mock_create_all:
            await db_session.init_db()
        mock_create_all.assert_awaited_once_with(db_session.engine)


def test_application_routes():
    # included routers may be grouped without a ``path`` of their own; the schema lists every endpoint
    paths = {getattr(route, "path", None) for route in main_app.routes} | set(main_app.openapi()["paths"])
    for expected in ("/health", "/version", "/api", "/api/auth/login", "/api/problems", "/api/resources", "/uploads"):
        assert expected in paths
