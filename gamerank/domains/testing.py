"""
Test doubles for domain tests: an in-memory catalog and enricher.
"""

from __future__ import annotations

from collections.abc import Sequence

from gamerank.config.errors import CatalogError, ErrorCode
from gamerank.domains.catalog.models import Candidate, PaginationCursor
from gamerank.domains.enrichment.models import (
    EnrichedRecord,
    EnrichmentOutcome,
    IneligibleReason,
)
from gamerank.domains.ranking.scorer import score


class FakeCatalog:
    """Candidate source over in-memory pages (1-based)."""

    def __init__(
        self,
        pages: Sequence[Sequence[Candidate]],
        top: Sequence[Candidate] | None = None,
        max_pages: int = 20,
        failing_pages: set[int] | None = None,
    ) -> None:
        self.pages = [list(p) for p in pages]
        self.top = list(top or [])
        self.max_pages = max_pages
        self.failing_pages = failing_pages or set()
        self.pages_materialized = 0
        self.requested: list[int] = []

    async def fetch_page(self, page_number: int) -> list[Candidate]:
        self.requested.append(page_number)
        if page_number in self.failing_pages:
            raise CatalogError(f"Catalog page {page_number} failed", {"page": page_number})
        if page_number > self.max_pages or page_number > len(self.pages):
            return []
        self.pages_materialized += 1
        return list(self.pages[page_number - 1])

    async def first_page(self) -> list[Candidate]:
        return await self.fetch_page(1)

    async def next_page(self, cursor: PaginationCursor) -> list[Candidate]:
        return await self.fetch_page(cursor.page_number + 1)

    async def top_slice(self, limit: int) -> list[Candidate]:
        self.requested.append(0)
        if 0 in self.failing_pages:
            raise CatalogError("Top listing failed")
        self.pages_materialized += 1
        return self.top[:limit]


class FakeEnricher:
    """Enricher over a score table; unknown ids are ineligible."""

    def __init__(
        self,
        scores: dict[int, tuple[float, float]],
        names: dict[int, str] | None = None,
        failing: set[int] | None = None,
    ) -> None:
        self.scores = scores
        self.names = names or {}
        self.failing = failing or set()
        self.calls: list[int] = []

    async def enrich(self, app_id: int) -> EnrichmentOutcome:
        self.calls.append(app_id)
        if app_id in self.failing:
            return EnrichmentOutcome.failed(app_id, "HTTP 500", ErrorCode.UPSTREAM_REQUEST_FAILED)
        if app_id not in self.scores:
            return EnrichmentOutcome.ineligible(app_id, IneligibleReason.MISSING_METACRITIC)
        return EnrichmentOutcome.enriched(
            make_record(app_id, *self.scores[app_id], name=self.names.get(app_id))
        )

    async def enrich_many(
        self,
        app_ids: Sequence[int],
        concurrency: int = 8,
    ) -> list[EnrichmentOutcome]:
        return [await self.enrich(app_id) for app_id in app_ids]


def make_record(
    app_id: int,
    metacritic: float,
    user: float,
    name: str | None = None,
) -> EnrichedRecord:
    return EnrichedRecord(
        app_id=app_id,
        name=name or f"Game {app_id}",
        metacritic_score=metacritic,
        user_score=user,
        composite=score(metacritic, user),
        store_url=f"https://store.steampowered.com/app/{app_id}",
    )


def candidates(*app_ids: int, names: dict[int, str] | None = None) -> list[Candidate]:
    names = names or {}
    return [Candidate(app_id=i, name=names.get(i, f"Game {i}")) for i in app_ids]

