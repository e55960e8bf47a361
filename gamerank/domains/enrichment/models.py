"""
Enrichment Models - Data types for enrichment domain.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from gamerank.config.errors import ErrorCode


class OutcomeStatus(str, Enum):
    """Result class of one enrichment attempt."""

    ENRICHED = "enriched"
    INELIGIBLE = "ineligible"  # Expected: source data cannot yield a record
    FAILED = "failed"  # Transport or payload failure, recoverable later


class IneligibleReason(str, Enum):
    """Why a candidate cannot produce a record."""

    UNKNOWN_APP = "unknown_app"
    MISSING_METACRITIC = "missing_metacritic"
    MISSING_REVIEW_SUMMARY = "missing_review_summary"
    NO_REVIEWS = "no_reviews"


class EnrichedRecord(BaseModel):
    """A candidate with both criteria present and a composite score."""

    app_id: int
    name: str
    metacritic_score: float
    user_score: float = Field(..., ge=0.0, le=100.0)
    composite: float
    rank: int | None = Field(default=None, ge=1)
    image_url: str | None = None
    store_url: str

    @model_validator(mode="after")
    def _composite_is_sum(self) -> EnrichedRecord:
        if self.composite != self.metacritic_score + self.user_score:
            raise ValueError("composite must equal metacritic_score + user_score")
        return self


class EnrichmentOutcome(BaseModel):
    """Typed per-item result; exactly one of record/reason/error is meaningful."""

    app_id: int
    status: OutcomeStatus
    record: EnrichedRecord | None = None
    reason: IneligibleReason | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def enriched(cls, record: EnrichedRecord) -> EnrichmentOutcome:
        return cls(app_id=record.app_id, status=OutcomeStatus.ENRICHED, record=record)

    @classmethod
    def ineligible(cls, app_id: int, reason: IneligibleReason) -> EnrichmentOutcome:
        return cls(app_id=app_id, status=OutcomeStatus.INELIGIBLE, reason=reason)

    @classmethod
    def failed(cls, app_id: int, error: str, code: ErrorCode) -> EnrichmentOutcome:
        return cls(app_id=app_id, status=OutcomeStatus.FAILED, error=error, error_code=code)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.ENRICHED


def partition_outcomes(
    outcomes: Iterable[EnrichmentOutcome],
) -> tuple[list[EnrichedRecord], list[EnrichmentOutcome], list[EnrichmentOutcome]]:
    """
    Split outcomes into (records, ineligible, failed), preserving order.
    """
    records: list[EnrichedRecord] = []
    ineligible: list[EnrichmentOutcome] = []
    failed: list[EnrichmentOutcome] = []

    for outcome in outcomes:
        if outcome.status == OutcomeStatus.ENRICHED and outcome.record is not None:
            records.append(outcome.record)
        elif outcome.status == OutcomeStatus.INELIGIBLE:
            ineligible.append(outcome)
        else:
            failed.append(outcome)

    return records, ineligible, failed
