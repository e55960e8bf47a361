"""
Enrichment Contracts - Interfaces for enrichment domain.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models import EnrichmentOutcome


@runtime_checkable
class Enricher(Protocol):
    """Contract for per-item enrichment."""

    async def enrich(self, app_id: int) -> EnrichmentOutcome:
        """
        Enrich a single candidate.

        Never raises for per-item problems; failures are reported in the outcome.
        """
        ...

    async def enrich_many(
        self,
        app_ids: Sequence[int],
        concurrency: int = 8,
    ) -> list[EnrichmentOutcome]:
        """Enrich several candidates concurrently, preserving input order."""
        ...
