"""
Enrichment Domain - Turns a catalog id into a scored record.

This domain handles:
- Fetching critic (Metacritic) and player (review tally) attributes
- Eligibility checks (missing score, zero reviews, unknown app)
- Per-item failure isolation via typed outcomes
"""

from .models import (
    EnrichedRecord,
    EnrichmentOutcome,
    IneligibleReason,
    OutcomeStatus,
    partition_outcomes,
)
from .contracts import Enricher
from .enricher import GameEnricher

__all__ = [
    # Contracts
    "Enricher",
    # Models
    "EnrichedRecord",
    "EnrichmentOutcome",
    "IneligibleReason",
    "OutcomeStatus",
    "partition_outcomes",
    # Implementations
    "GameEnricher",
]
