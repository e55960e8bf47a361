"""
Ranking Aggregator - Turns catalog candidates into a globally ranked list.

Features:
- Lazy page materialization driven by batch demand
- Sequential enrichment in source order (deterministic tie-breaking)
- Attempt-bounded or success-bounded batches
- All-or-nothing batches on catalog failure
- Bulk mode: one listing, concurrent enrichment, single rank pass
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from gamerank.config.errors import CatalogError
from gamerank.domains.catalog.models import PaginationCursor
from gamerank.domains.enrichment.models import (
    EnrichedRecord,
    EnrichmentOutcome,
    partition_outcomes,
)

from .models import BatchPolicy, BatchResult, RankingState

if TYPE_CHECKING:
    from gamerank.domains.catalog import CandidateSource
    from gamerank.domains.enrichment import Enricher

logger = logging.getLogger(__name__)

__all__ = ["RankingAggregator", "rank_in_place"]


def rank_in_place(records: list[EnrichedRecord]) -> None:
    """
    Stable-sort by composite descending and assign dense ranks 1..N.

    Equal composites keep their existing relative order.
    """
    records.sort(key=lambda r: r.composite, reverse=True)
    for rank, record in enumerate(records, 1):
        record.rank = rank


class RankingAggregator:
    """
    Owner of the ranked list and pagination state for one session.

    Ranks are renumbered whenever membership grows; do not hold on to a
    record's rank across a batch.

    Example:
        >>> aggregator = RankingAggregator(catalog, enricher)
        >>> result = await aggregator.load_next_batch(10)
        >>> [r.rank for r in aggregator.ranked]
        [1, 2, 3, 4, 5, 6, 7]
    """

    def __init__(
        self,
        source: CandidateSource,
        enricher: Enricher,
        policy: BatchPolicy = BatchPolicy.ATTEMPTS,
        paged: bool = True,
        bulk_limit: int = 100,
        concurrency: int = 8,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            source: Candidate source
            enricher: Per-item enrichment client
            policy: Whether batch_size bounds attempts or added records
            paged: False selects bulk mode (one top_slice, no further paging)
            bulk_limit: Listing size for bulk mode
            concurrency: Maximum in-flight enrichments for load_all
        """
        self._source = source
        self._enricher = enricher
        self.policy = policy
        self.paged = paged
        self.bulk_limit = bulk_limit
        self.concurrency = concurrency
        self._state = RankingState()
        self._lock = asyncio.Lock()

    @property
    def ranked(self) -> tuple[EnrichedRecord, ...]:
        return tuple(self._state.records)

    @property
    def cursor(self) -> PaginationCursor:
        return self._state.cursor.model_copy()

    @property
    def pages_loaded(self) -> int:
        """Pages of the paged catalog consumed so far; bulk listings are not counted."""
        return self._state.pages_loaded

    @property
    def exhausted(self) -> bool:
        return self._state.exhausted

    @property
    def ranked_ids(self) -> frozenset[int]:
        return frozenset(self._state.ranked_ids)

    def reset(self) -> None:
        """
        Discard ranked list, cursor and consumption pointer together.

        A batch still in flight finishes against the discarded state and
        is dropped at commit time.
        """
        self._state = RankingState()
        logger.debug("Ranking state reset")

    def has_more(self) -> bool:
        state = self._state
        return state.cursor.next_index < len(state.candidates) or not state.exhausted

    async def load_next_batch(self, batch_size: int) -> BatchResult:
        """
        Consume up to `batch_size` candidates (or successes) and re-rank.

        Concurrent calls run one at a time.

        Args:
            batch_size: Attempts (ATTEMPTS policy) or records (SUCCESSES policy)

        Returns:
            Batch summary with per-item outcomes

        Raises:
            CatalogError: A page fetch failed; the ranked list and cursor are
                left exactly as they were before the call
        """
        if batch_size <= 0:
            return BatchResult(has_more=self.has_more())

        async with self._lock:
            return await self._run_batch(self._state, batch_size)

    async def _run_batch(self, state: RankingState, batch_size: int) -> BatchResult:
        checkpoint = state.checkpoint()
        outcomes: list[EnrichmentOutcome] = []
        new_records: list[EnrichedRecord] = []
        batch_ids: set[int] = set()
        pages_fetched = 0

        try:
            while not self._batch_full(len(outcomes), len(new_records), batch_size):
                if state.cursor.next_index >= len(state.candidates):
                    if state.exhausted:
                        break
                    await self._materialize(state)
                    pages_fetched += 1
                    continue

                candidate = state.candidates[state.cursor.next_index]
                state.cursor.next_index += 1
                if candidate.app_id in state.ranked_ids or candidate.app_id in batch_ids:
                    continue
                batch_ids.add(candidate.app_id)

                outcome = await self._enricher.enrich(candidate.app_id)
                outcomes.append(outcome)
                if outcome.record is not None:
                    new_records.append(outcome.record)
        except CatalogError as e:
            state.restore(checkpoint)
            logger.error("Batch aborted, ranked list unchanged: %s", e.message)
            raise

        if state is not self._state:
            logger.info("Session reset during batch; dropping %d records", len(new_records))
            return BatchResult(
                attempted=len(outcomes),
                pages_fetched=pages_fetched,
                outcomes=outcomes,
                has_more=self.has_more(),
            )

        if new_records:
            self._commit(state, new_records)

        result = BatchResult(
            attempted=len(outcomes),
            added=len(new_records),
            pages_fetched=pages_fetched,
            outcomes=outcomes,
            has_more=self.has_more(),
        )
        logger.info(
            "Batch: attempted=%d added=%d ineligible=%d failed=%d total=%d",
            result.attempted,
            result.added,
            len(result.ineligible),
            len(result.failed),
            len(state.records),
        )
        return result

    async def load_all(self) -> BatchResult:
        """
        Bulk mode: fetch one listing, enrich everything concurrently, rank once.

        Replaces any existing session state. On CatalogError nothing changes.
        The paged cursor is left at its start, so a later catalog scan
        still begins at page 1.
        """
        async with self._lock:
            started = self._state
            candidates = await self._source.top_slice(self.bulk_limit)
            unique = list({c.app_id: c for c in candidates}.values())

            outcomes = await self._enricher.enrich_many(
                [c.app_id for c in unique],
                concurrency=self.concurrency,
            )
            records, ineligible, failed = partition_outcomes(outcomes)

            if started is not self._state:
                logger.info("Session reset during bulk load; dropping %d records", len(records))
                return BatchResult(
                    attempted=len(outcomes),
                    pages_fetched=1,
                    outcomes=outcomes,
                    has_more=self.has_more(),
                )

            state = RankingState(candidates=unique, exhausted=True)
            state.cursor.next_index = len(unique)
            self._state = state
            self._commit(state, records)

        logger.info(
            "Bulk load: candidates=%d ranked=%d ineligible=%d failed=%d",
            len(unique),
            len(records),
            len(ineligible),
            len(failed),
        )
        return BatchResult(
            attempted=len(outcomes),
            added=len(records),
            pages_fetched=1,
            outcomes=outcomes,
            has_more=False,
        )

    def _batch_full(self, attempted: int, added: int, batch_size: int) -> bool:
        if self.policy == BatchPolicy.SUCCESSES:
            return added >= batch_size
        return attempted >= batch_size

    async def _materialize(self, state: RankingState) -> None:
        """Append one more page of candidates, or mark the source exhausted."""
        source = self._source

        if not self.paged:
            # The bulk listing is not a catalog page; the paged cursor stays put
            state.candidates.extend(await source.top_slice(self.bulk_limit))
            state.exhausted = True
            return

        if state.pages_loaded == 0:
            page = await source.first_page()
            page_number = 1
        else:
            page = await source.next_page(state.cursor)
            page_number = state.cursor.page_number + 1

        if not page:
            state.exhausted = True
            logger.info("Catalog exhausted after %d pages", state.pages_loaded)
            return

        state.candidates.extend(page)
        state.pages_loaded += 1
        state.cursor.page_number = page_number
        if page_number >= source.max_pages:
            state.exhausted = True

    @staticmethod
    def _commit(state: RankingState, records: Iterable[EnrichedRecord]) -> None:
        for record in records:
            state.records.append(record)
            state.ranked_ids.add(record.app_id)
        rank_in_place(state.records)
