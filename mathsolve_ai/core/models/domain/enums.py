"""Enumerations shared by entities, services and API models."""

from __future__ import annotations

from enum import Enum


class Difficulty(str, Enum):
    """Difficulty level of a problem or resource."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ResourceType(str, Enum):
    """Kind of learning material."""

    TUTORIAL = "TUTORIAL"
    GUIDE = "GUIDE"
    REFERENCE = "REFERENCE"


class AuthProvider(str, Enum):
    LOCAL = "local"
    GOOGLE = "google"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
