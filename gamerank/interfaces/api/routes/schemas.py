"""
Route Schemas - Response shapes shared by ranking and search routes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from gamerank.domains.enrichment import EnrichedRecord


class RankedGameItem(BaseModel):
    """One row of ranked output."""

    rank: int
    app_id: int
    name: str
    metacritic_score: float
    user_score: float
    composite: float
    image_url: str | None
    store_url: str

    @classmethod
    def from_record(cls, record: EnrichedRecord, rank: int | None = None) -> RankedGameItem:
        return cls(
            rank=rank if rank is not None else record.rank,
            app_id=record.app_id,
            name=record.name,
            metacritic_score=record.metacritic_score,
            user_score=record.user_score,
            composite=record.composite,
            image_url=record.image_url,
            store_url=record.store_url,
        )


class RankingResponse(BaseModel):
    """Current ranked list."""

    games: list[RankedGameItem]
    total: int
    pages_loaded: int
    has_more: bool


class BatchRequest(BaseModel):
    """Batch load request body."""

    batch_size: int = Field(default=10, ge=0, le=100)


class BatchSummary(BaseModel):
    """Per-batch counters."""

    attempted: int
    added: int
    ineligible: int
    failed: int
    pages_fetched: int


class BatchResponse(RankingResponse):
    """Ranked list after a batch load."""

    batch: BatchSummary
