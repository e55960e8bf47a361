"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import SearchResults


@runtime_checkable
class SearchIndex(Protocol):
    """Contract for ranked-list search implementations."""

    async def search(self, query: str) -> SearchResults:
        """Execute search and return hits in ascending rank order."""
        ...
