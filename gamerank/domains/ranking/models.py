"""
Ranking Models - Data types for ranking domain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from gamerank.domains.catalog.models import Candidate, PaginationCursor
from gamerank.domains.enrichment.models import (
    EnrichedRecord,
    EnrichmentOutcome,
    OutcomeStatus,
)


class BatchPolicy(str, Enum):
    """What `batch_size` bounds in a batch load."""

    ATTEMPTS = "attempts"  # Up to N enrichment attempts; may add fewer than N
    SUCCESSES = "successes"  # Keep consuming until N records are added


@dataclass
class RankingState:
    """Mutable per-session aggregation state, owned by one aggregator."""

    records: list[EnrichedRecord] = field(default_factory=list)
    cursor: PaginationCursor = field(default_factory=PaginationCursor)
    candidates: list[Candidate] = field(default_factory=list)
    pages_loaded: int = 0
    exhausted: bool = False
    ranked_ids: set[int] = field(default_factory=set)

    def checkpoint(self) -> tuple[PaginationCursor, int, int, bool]:
        """Capture the consumption state so a failed batch can roll back."""
        return (
            self.cursor.model_copy(),
            len(self.candidates),
            self.pages_loaded,
            self.exhausted,
        )

    def restore(self, checkpoint: tuple[PaginationCursor, int, int, bool]) -> None:
        cursor, candidate_count, pages_loaded, exhausted = checkpoint
        self.cursor = cursor
        del self.candidates[candidate_count:]
        self.pages_loaded = pages_loaded
        self.exhausted = exhausted


class BatchResult(BaseModel):
    """Summary of one batch load."""

    attempted: int = 0
    added: int = 0
    pages_fetched: int = 0
    outcomes: list[EnrichmentOutcome] = Field(default_factory=list)
    has_more: bool = False

    @property
    def records(self) -> list[EnrichedRecord]:
        return [o.record for o in self.outcomes if o.record is not None]

    @property
    def ineligible(self) -> list[EnrichmentOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.INELIGIBLE]

    @property
    def failed(self) -> list[EnrichmentOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]
