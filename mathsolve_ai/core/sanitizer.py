"""
Input sanitization.

Strings are cleaned in three passes: NUL bytes are removed and whitespace
trimmed, HTML is stripped with ``nh3`` (script and style bodies are dropped
entirely, entity-encoded markup included), and finally a fixed denylist of
script-injection patterns is removed. Containers are walked recursively;
non-string scalars pass through.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Any, FrozenSet

import nh3

BASIC_HTML_TAGS = frozenset({"b", "i", "em", "strong", "a", "p", "br"})
BASIC_HTML_ATTRIBUTES = {"a": {"href", "title"}}

DEFAULT_EXCLUDED_FIELDS = frozenset(
    {"password", "currentPassword", "newPassword", "confirmPassword", "token", "refreshToken", "code"}
)

DANGEROUS_PATTERNS = (
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"vbscript\s*:", re.IGNORECASE),
    re.compile(r"on(?:load|error|click|mouseover|focus|blur|change|submit)\s*=", re.IGNORECASE),
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
    re.compile(r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>", re.IGNORECASE),
    re.compile(r"<embed\b[^>]*>", re.IGNORECASE),
    re.compile(r"<link\b[^>]*>", re.IGNORECASE),
    re.compile(r"<meta\b[^>]*>", re.IGNORECASE),
)

# Anything a parser could open as a tag, comment or declaration
MARKUP_PATTERN = re.compile(r"<[A-Za-z/!?]")
MAX_STRIP_PASSES = 5


@dataclass(frozen=True)
class SanitizeOptions:
    """How strings are cleaned.

    Attributes:
        allow_basic_html: Keep simple formatting tags instead of stripping all markup
        excluded_fields: Mapping keys whose values are left untouched
        max_depth: Containers nested deeper than this are returned as-is
    """

    allow_basic_html: bool = False
    excluded_fields: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_FIELDS)
    max_depth: int = 32


DEFAULT_OPTIONS = SanitizeOptions()


def remove_dangerous_patterns(value: str) -> str:
    for pattern in DANGEROUS_PATTERNS:
        value = pattern.sub("", value)
    return value


def strip_markup(value: str) -> str:
    """Strip every tag, unescaping entities only when no markup comes back.

    Text such as ``x < 5`` survives unchanged, while ``&lt;img&gt;`` is
    stripped like ``<img>``. Input still carrying markup after
    ``MAX_STRIP_PASSES`` is returned entity-escaped.
    """
    for _ in range(MAX_STRIP_PASSES):
        cleaned = nh3.clean(value, tags=set(), attributes={})
        unescaped = html.unescape(cleaned)
        if not MARKUP_PATTERN.search(unescaped):
            return unescaped
        value = unescaped
    return cleaned


def sanitize_string(value: str, options: SanitizeOptions = DEFAULT_OPTIONS) -> str:
    """Clean a single string."""
    cleaned = value.replace("\x00", "").strip()
    if not cleaned:
        return cleaned

    if options.allow_basic_html:
        cleaned = nh3.clean(cleaned, tags=set(BASIC_HTML_TAGS), attributes=BASIC_HTML_ATTRIBUTES)
    else:
        cleaned = strip_markup(cleaned)

    return remove_dangerous_patterns(cleaned).strip()


def sanitize_value(value: Any, options: SanitizeOptions = DEFAULT_OPTIONS, _depth: int = 0) -> Any:
    """Recursively sanitize strings inside dicts, lists and tuples."""
    if isinstance(value, str):
        return sanitize_string(value, options)
    if _depth >= options.max_depth:
        return value
    if isinstance(value, dict):
        return {
            key: item if key in options.excluded_fields else sanitize_value(item, options, _depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_value(item, options, _depth + 1) for item in value)
    return value
