"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from gamerank.domains.enrichment.models import EnrichedRecord, EnrichmentOutcome


class HitSource(str, Enum):
    """Where a search hit came from."""

    RANKED = "ranked"  # Existing member of the ranked list
    FALLBACK = "fallback"  # Found by scanning further catalog pages


class SearchHit(BaseModel):
    """A record plus the rank to display for it."""

    record: EnrichedRecord
    rank: int = Field(..., ge=1)
    source: HitSource


class SearchResults(BaseModel):
    """Search response."""

    query: str
    hits: list[SearchHit] = Field(default_factory=list)
    fallback_used: bool = False
    pages_scanned: int = 0
    outcomes: list[EnrichmentOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.hits)
