"""Tests for the request logging middleware."""

import logging
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import FastAPI
from starlette.responses import Response

from mathsolve_ai.server.middleware.request_logging import RequestLoggingMiddleware, level_for_status

MODULE = "mathsolve_ai.server.middleware.request_logging"


@pytest.fixture
def middleware() -> RequestLoggingMiddleware:
    return RequestLoggingMiddleware(FastAPI())


@pytest.fixture
def mock_request():
    request = Mock()
    request.method = "GET"
    request.url.path = "/api/problems"
    request.client.host = "127.0.0.1"
    return request


@pytest.mark.parametrize(
    "status_code,level",
    [(200, logging.INFO), (201, logging.INFO), (302, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
)
def test_level_for_status(status_code, level):
    assert level_for_status(status_code) == level


class TestDispatch:
    async def test_sets_process_time_and_logs(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(status_code=200))

        with patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.log_api_request") as mock_log_api:
            response = await middleware.dispatch(mock_request, call_next)

        float(response.headers["X-Process-Time"])
        level, message = mock_logger.log.call_args.args[:2]
        assert level == logging.INFO
        assert message.startswith("GET /api/problems 200")
        assert mock_log_api.call_args.kwargs["status_code"] == 200

    async def test_client_errors_log_as_warning(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(status_code=404))

        with patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.log_api_request"):
            await middleware.dispatch(mock_request, call_next)

        assert mock_logger.log.call_args.args[0] == logging.WARNING

    async def test_slow_requests_warn(self, middleware, mock_request):
        call_next = AsyncMock(return_value=Response(status_code=200))

        with patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.log_api_request"), patch(
            f"{MODULE}.time"
        ) as mock_time:
            mock_time.time.side_effect = [100.0, 102.0]
            response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Process-Time"] == "2000.00"
        assert "Slow API request" in mock_logger.warning.call_args.args[0]

    async def test_exceptions_are_logged_and_reraised(self, middleware, mock_request):
        call_next = AsyncMock(side_effect=RuntimeError("boom"))

        with patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.log_api_request") as mock_log_api:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, call_next)

        mock_logger.error.assert_called_once()
        assert mock_log_api.call_args.kwargs["status_code"] == 500
