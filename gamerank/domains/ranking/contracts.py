"""
Ranking Contracts - Interfaces for ranking domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from gamerank.domains.catalog.models import PaginationCursor
from gamerank.domains.enrichment.models import EnrichedRecord

from .models import BatchResult


@runtime_checkable
class Aggregator(Protocol):
    """Contract for the owner of the ranked list."""

    @property
    def ranked(self) -> tuple[EnrichedRecord, ...]:
        """Snapshot of the ranked list, rank-ascending."""
        ...

    @property
    def cursor(self) -> PaginationCursor:
        """Copy of the pagination cursor."""
        ...

    @property
    def pages_loaded(self) -> int:
        """Number of catalog pages materialized this session."""
        ...

    def reset(self) -> None:
        """Discard all session state."""
        ...

    def has_more(self) -> bool:
        """Whether another batch could add candidates."""
        ...

    async def load_next_batch(self, batch_size: int) -> BatchResult:
        """Consume the next batch of candidates and re-rank."""
        ...

    async def load_all(self) -> BatchResult:
        """Bulk-load one full listing and rank it once."""
        ...
