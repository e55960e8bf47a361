"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    CatalogError,
    EnrichmentError,
    ErrorCode,
    GameRankError,
    SearchError,
    TransportError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "GameRankError",
    "TransportError",
    "CatalogError",
    "EnrichmentError",
    "SearchError",
]
