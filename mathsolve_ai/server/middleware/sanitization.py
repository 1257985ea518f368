"""
Sanitization Middleware.

Cleans every string in JSON request bodies and in the query string before
the request reaches routing and validation. Path parameters are cleaned by
the ``sanitize_path_params`` dependency, since they are only known once the
route has matched.
"""

from __future__ import annotations

import json
from urllib.parse import parse_qsl, urlencode

from fastapi import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mathsolve_ai.core.logging_config import get_logger
from mathsolve_ai.core.sanitizer import DEFAULT_OPTIONS, SanitizeOptions, sanitize_string, sanitize_value

logger = get_logger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH"}


class SanitizationMiddleware:
    """Pure ASGI middleware that rewrites the query string and JSON body."""

    def __init__(self, app: ASGIApp, options: SanitizeOptions = DEFAULT_OPTIONS) -> None:
        self.app = app
        self.options = options

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        if scope.get("query_string"):
            scope["query_string"] = self._clean_query(scope["query_string"])

        if scope["method"] in BODY_METHODS and self._is_json(scope):
            receive = await self._clean_body(scope, receive)

        await self.app(scope, receive, send)

    def _clean_query(self, raw: bytes) -> bytes:
        pairs = parse_qsl(raw.decode("latin-1"), keep_blank_values=True)
        cleaned = [
            (key, value if key in self.options.excluded_fields else sanitize_string(value, self.options))
            for key, value in pairs
        ]
        return urlencode(cleaned).encode("latin-1")

    @staticmethod
    def _is_json(scope: Scope) -> bool:
        for name, value in scope.get("headers", []):
            if name == b"content-type":
                return value.split(b";")[0].strip().lower() == b"application/json"
        return False

    async def _clean_body(self, scope: Scope, receive: Receive) -> Receive:
        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before the body finished; let the app see it
                return self._replay(message)
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)
        body = b"".join(chunks)

        try:
            payload = json.loads(body) if body else None
        except (UnicodeDecodeError, json.JSONDecodeError):
            # malformed JSON is reported by request validation, untouched
            return self._replay({"type": "http.request", "body": body, "more_body": False})

        if payload is not None:
            body = json.dumps(sanitize_value(payload, self.options)).encode("utf-8")
            scope["headers"] = [
                (name, value) for name, value in scope.get("headers", []) if name != b"content-length"
            ] + [(b"content-length", str(len(body)).encode("latin-1"))]
        return self._replay({"type": "http.request", "body": body, "more_body": False})

    @staticmethod
    def _replay(first: Message) -> Receive:
        sent = False

        async def receive() -> Message:
            nonlocal sent
            if not sent:
                sent = True
                return first
            return {"type": "http.disconnect"}

        return receive


async def sanitize_path_params(request: Request) -> None:
    """Clean matched path parameters in place before the endpoint reads them."""
    params = request.scope.get("path_params")
    if params:
        request.scope["path_params"] = {
            key: sanitize_string(value) if isinstance(value, str) else value for key, value in params.items()
        }
