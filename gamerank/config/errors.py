"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from gamerank.config.errors import ErrorCode, GameRankError

    raise GameRankError(ErrorCode.CATALOG_FETCH_FAILED, "SteamSpy page 3 failed")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Transport errors
    UPSTREAM_REQUEST_FAILED = "UPSTREAM_REQUEST_FAILED"

    # Catalog errors
    CATALOG_FETCH_FAILED = "CATALOG_FETCH_FAILED"

    # Enrichment errors
    ENRICHMENT_FAILED = "ENRICHMENT_FAILED"

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


class GameRankError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class TransportError(GameRankError):
    """Non-success HTTP status or network failure on an upstream call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.UPSTREAM_REQUEST_FAILED, message, details)


class CatalogError(GameRankError):
    """Catalog page fetch failed; aborts the whole batch."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CATALOG_FETCH_FAILED, message, details)


class EnrichmentError(GameRankError):
    """Enrichment domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.ENRICHMENT_FAILED, message, details)


class SearchError(GameRankError):
    """Search domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_INVALID_QUERY, message, details)
