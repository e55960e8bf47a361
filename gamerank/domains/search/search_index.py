"""
Ranked Search Index - Name search with a budgeted catalog fallback.

Search order:
1. Local pass over the ranked list (existing ranks, no network calls)
2. Only on zero local matches: scan catalog pages past the aggregator's
   cursor, enrich name-matching candidates, and place each match relative
   to the ranked list without inserting it
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gamerank.config.errors import CatalogError, SearchError
from gamerank.domains.catalog.models import PaginationCursor
from gamerank.domains.enrichment.models import EnrichedRecord, EnrichmentOutcome

from .models import HitSource, SearchHit, SearchResults

if TYPE_CHECKING:
    from gamerank.domains.catalog import Candidate, CandidateSource
    from gamerank.domains.enrichment import Enricher
    from gamerank.domains.ranking import Aggregator

logger = logging.getLogger(__name__)

__all__ = ["RankedSearchIndex", "normalize_query", "relative_hits"]

MAX_QUERY_LENGTH = 200


def normalize_query(query: str) -> str:
    """Trim and case-fold a raw query."""
    return query.strip().casefold()


class RankedSearchIndex:
    """
    Search over an aggregator's ranked list.

    Reads the aggregator but never mutates it; the fallback scan keeps
    its own cursor.

    Example:
        >>> index = RankedSearchIndex(aggregator, catalog, enricher)
        >>> results = await index.search("portal")
        >>> [(h.rank, h.record.name) for h in results.hits]
        [(3, 'Portal 2')]
    """

    def __init__(
        self,
        aggregator: Aggregator,
        source: CandidateSource,
        enricher: Enricher,
        page_budget: int = 5,
        result_budget: int = 10,
    ) -> None:
        """
        Initialize search index.

        Args:
            aggregator: Owner of the ranked list (read-only here)
            source: Candidate source for the fallback scan
            enricher: Enrichment client for fallback matches
            page_budget: Maximum catalog pages scanned per fallback
            result_budget: Maximum fallback matches returned
        """
        self._aggregator = aggregator
        self._source = source
        self._enricher = enricher
        self.page_budget = page_budget
        self.result_budget = result_budget

    async def search(self, query: str) -> SearchResults:
        """
        Search by display name.

        Args:
            query: Raw query text; empty means "no filter"

        Returns:
            Hits in ascending rank order

        Raises:
            SearchError: Query longer than MAX_QUERY_LENGTH
        """
        if len(query) > MAX_QUERY_LENGTH:
            raise SearchError(
                f"Query too long (max {MAX_QUERY_LENGTH} characters)",
                details={"length": len(query)},
            )

        needle = normalize_query(query)
        ranked = self._aggregator.ranked

        if not needle:
            return SearchResults(query=query, hits=_ranked_hits(ranked))

        local = [r for r in ranked if needle in r.name.casefold()]
        if local:
            logger.info("Search '%s': %d local matches", needle[:50], len(local))
            return SearchResults(query=query, hits=_ranked_hits(local))

        return await self._fallback(query, needle, ranked)

    async def _fallback(
        self,
        query: str,
        needle: str,
        ranked: tuple[EnrichedRecord, ...],
    ) -> SearchResults:
        ranked_ids = {r.app_id for r in ranked}
        seen: set[int] = set()
        matches: list[EnrichedRecord] = []
        outcomes: list[EnrichmentOutcome] = []
        pages_scanned = 0

        scan_cursor: PaginationCursor | None = None
        if self._aggregator.pages_loaded > 0:
            scan_cursor = self._aggregator.cursor

        while pages_scanned < self.page_budget and len(matches) < self.result_budget:
            try:
                page = await self._next_scan_page(scan_cursor)
            except CatalogError as e:
                logger.warning("Fallback scan stopped early: %s", e.message)
                break

            pages_scanned += 1
            if not page:
                break
            if scan_cursor is None:
                scan_cursor = PaginationCursor(page_number=1)
            else:
                scan_cursor.page_number += 1

            for candidate in page:
                if len(matches) >= self.result_budget:
                    break
                if candidate.app_id in ranked_ids or candidate.app_id in seen:
                    continue
                if not candidate.matches(needle):
                    continue
                seen.add(candidate.app_id)

                outcome = await self._enricher.enrich(candidate.app_id)
                outcomes.append(outcome)
                if outcome.record is not None:
                    matches.append(outcome.record)

        hits = relative_hits(ranked, matches)
        logger.info(
            "Search '%s': %d fallback matches from %d pages",
            needle[:50],
            len(hits),
            pages_scanned,
        )
        return SearchResults(
            query=query,
            hits=hits,
            fallback_used=True,
            pages_scanned=pages_scanned,
            outcomes=outcomes,
        )

    async def _next_scan_page(self, cursor: PaginationCursor | None) -> list[Candidate]:
        if cursor is None:
            return await self._source.first_page()
        return await self._source.next_page(cursor)


def relative_hits(
    ranked: tuple[EnrichedRecord, ...] | list[EnrichedRecord],
    matches: list[EnrichedRecord],
) -> list[SearchHit]:
    """
    Rank each match as if it were inserted into the ranked list.

    Ranked records precede matches in the scratch order, so a match tying
    an existing record lands after it. Nothing is mutated.
    """
    scratch = sorted([*ranked, *matches], key=lambda r: r.composite, reverse=True)
    match_ids = {id(m) for m in matches}
    hits = [
        SearchHit(record=record, rank=position, source=HitSource.FALLBACK)
        for position, record in enumerate(scratch, 1)
        if id(record) in match_ids
    ]
    return hits


def _ranked_hits(records: tuple[EnrichedRecord, ...] | list[EnrichedRecord]) -> list[SearchHit]:
    return [
        SearchHit(record=r, rank=r.rank, source=HitSource.RANKED)
        for r in records
        if r.rank is not None
    ]
