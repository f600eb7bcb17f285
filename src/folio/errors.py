"""Structured errors for folio.

Per-file problems never raise across the library boundary (they are logged
and the file is degraded or skipped). FolioError is reserved for calls that
are structurally invalid: an unknown kind or locale, an over-long query, a
missing content root.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes for --json-errors output."""

    CONTENT_ROOT_NOT_FOUND = "CONTENT_ROOT_NOT_FOUND"
    UNSUPPORTED_LOCALE = "UNSUPPORTED_LOCALE"
    UNKNOWN_KIND = "UNKNOWN_KIND"
    QUERY_TOO_LONG = "QUERY_TOO_LONG"
    ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"
    INVALID_SLUG = "INVALID_SLUG"
    PARSE_ERROR = "PARSE_ERROR"
    INDEX_UNAVAILABLE = "INDEX_UNAVAILABLE"


def format_error_json(code: ErrorCode | str, message: str, details: dict[str, Any] | None = None) -> str:
    """Format an error as a JSON document: {"error": {"code", "message", "details"?}}."""
    code = code.value if isinstance(code, ErrorCode) else code
    error: dict[str, dict[str, Any]] = {"error": {"code": code, "message": message}}
    if details:
        error["error"]["details"] = details
    return json.dumps(error)


class FolioError(Exception):
    """An error surfaced to the caller of a folio operation."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_json(self) -> str:
        return format_error_json(self.code.value, self.message, self.details)

    @classmethod
    def unsupported_locale(cls, locale: str, supported: tuple[str, ...]) -> FolioError:
        return cls(
            ErrorCode.UNSUPPORTED_LOCALE,
            f"Unsupported locale '{locale}'",
            {"locale": locale, "suggestion": f"Use one of: {', '.join(supported)}"},
        )

    @classmethod
    def unknown_kind(cls, kind: str) -> FolioError:
        return cls(
            ErrorCode.UNKNOWN_KIND,
            f"Unknown content kind '{kind}'",
            {"kind": kind, "suggestion": "Use one of: blog, doc, release"},
        )

    @classmethod
    def entry_not_found(cls, kind: str, slug: str, locale: str) -> FolioError:
        return cls(
            ErrorCode.ENTRY_NOT_FOUND,
            f"No {kind} entry '{slug}' for locale '{locale}'",
            {"kind": kind, "slug": slug, "locale": locale},
        )

    @classmethod
    def invalid_slug(cls, slug: str) -> FolioError:
        return cls(ErrorCode.INVALID_SLUG, f"Invalid slug: {slug!r}", {"slug": slug})

    @classmethod
    def index_unavailable(cls, path: str) -> FolioError:
        return cls(
            ErrorCode.INDEX_UNAVAILABLE,
            f"Search index not found at {path}",
            {"path": path, "suggestion": "Run 'folio search-index build' first"},
        )


class MalformedQueryError(FolioError):
    """Raised when a search query exceeds the allowed length."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            ErrorCode.QUERY_TOO_LONG,
            "Search query too long",
            {"length": length, "limit": limit},
        )
