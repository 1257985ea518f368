"""
Shared I/O models.

Every API payload is camelCase on the wire while Python code stays
snake_case; ``CamelModel`` bridges the two. Responses are wrapped in the
``ApiResponse`` success envelope.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from mathsolve_ai.core.database.repositories.base import Page
from mathsolve_ai.core.sanitizer import DEFAULT_EXCLUDED_FIELDS

DataT = TypeVar("DataT")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys and populated from ORM objects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RequestModel(CamelModel):
    """Base for request bodies.

    Surrounding whitespace is stripped from strings, one list level deep,
    except for the credential fields the sanitizer also leaves untouched.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _strip_strings(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {key: value if _is_verbatim(key) else _strip(value) for key, value in data.items()}


def _is_verbatim(key: Any) -> bool:
    return isinstance(key, str) and (key in DEFAULT_EXCLUDED_FIELDS or to_camel(key) in DEFAULT_EXCLUDED_FIELDS)


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return [item.strip() if isinstance(item, str) else item for item in value]
    return value


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope returned by every endpoint."""

    success: bool = True
    message: str = "Success"
    data: Optional[DataT] = None
    timestamp: str = Field(default_factory=_timestamp)


class MessageResponse(CamelModel):
    """Envelope for endpoints that only report an outcome."""

    success: bool = True
    message: str
    timestamp: str = Field(default_factory=_timestamp)


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationMeta":
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


def success(data: Optional[DataT] = None, message: str = "Success") -> ApiResponse[DataT]:
    return ApiResponse(data=data, message=message)


def error_body(message: str, errors: Optional[list] = None) -> dict:
    """Build the JSON body of an error response."""
    body = {"success": False, "message": message, "timestamp": _timestamp()}
    if errors:
        body["errors"] = errors
    return body

