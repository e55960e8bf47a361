"""
Catalog Contracts - Interfaces for catalog domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import Candidate, PaginationCursor


@runtime_checkable
class CandidateSource(Protocol):
    """Contract for lazily paged candidate discovery."""

    max_pages: int
    pages_materialized: int

    async def first_page(self) -> list[Candidate]:
        """Fetch page 1. Raises CatalogError on failure."""
        ...

    async def next_page(self, cursor: PaginationCursor) -> list[Candidate]:
        """
        Fetch the page after `cursor.page_number`.

        Returns an empty list once the source is exhausted.
        Raises CatalogError on failure.
        """
        ...

    async def top_slice(self, limit: int) -> list[Candidate]:
        """Fetch a one-shot bulk listing, truncated to `limit`."""
        ...
