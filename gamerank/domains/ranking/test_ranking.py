"""
Tests for scoring and the ranking aggregator.
"""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from gamerank.config.errors import CatalogError
from gamerank.domains.enrichment.models import EnrichedRecord, OutcomeStatus
from gamerank.domains.testing import FakeCatalog, FakeEnricher, candidates, make_record

from .aggregator import RankingAggregator, rank_in_place
from .models import BatchPolicy
from .scorer import score, user_score_percentage


def _assert_dense(records: tuple[EnrichedRecord, ...]) -> None:
    assert [r.rank for r in records] == list(range(1, len(records) + 1))
    composites = [r.composite for r in records]
    assert composites == sorted(composites, reverse=True)


# --- Scorer Tests ---


def test_score_is_plain_sum() -> None:
    """Test composite is an unweighted sum."""
    assert score(85, 80.0) == 165.0
    assert score(0, 0) == 0


def test_user_score_percentage() -> None:
    """Test positive share of reviews."""
    assert user_score_percentage(120, 30) == 80.0
    assert user_score_percentage(1, 0) == 100.0
    assert user_score_percentage(0, 5) == 0.0


def test_user_score_percentage_no_reviews() -> None:
    """Test zero-sum tally is undefined."""
    assert user_score_percentage(0, 0) is None


# --- Record Invariant Tests ---


def test_record_composite_must_equal_sum() -> None:
    """Test EnrichedRecord rejects inconsistent composites."""
    with pytest.raises(ValidationError):
        EnrichedRecord(
            app_id=1,
            name="Broken",
            metacritic_score=80,
            user_score=70.0,
            composite=151.0,
            store_url="https://store.steampowered.com/app/1",
        )


def test_rank_in_place_keeps_tie_order() -> None:
    """Test equal composites keep insertion order after sorting."""
    records = [make_record(1, 80, 70), make_record(2, 90, 80), make_record(3, 70, 80)]
    rank_in_place(records)

    assert [(r.app_id, r.rank) for r in records] == [(2, 1), (1, 2), (3, 3)]


# --- Aggregator: basic batches ---


async def test_first_batch_produces_dense_ranks() -> None:
    """Test a batch ranks all eligible candidates densely."""
    catalog = FakeCatalog([candidates(1, 2, 3, 4, 5)])
    enricher = FakeEnricher({1: (70, 60.0), 2: (90, 95.0), 3: (80, 85.0), 4: (60, 50.0), 5: (88, 90.0)})
    aggregator = RankingAggregator(catalog, enricher)

    result = await aggregator.load_next_batch(10)

    assert result.added == 5
    assert result.pages_fetched >= 1
    _assert_dense(aggregator.ranked)
    assert [r.app_id for r in aggregator.ranked] == [2, 5, 3, 1, 4]
    for record in aggregator.ranked:
        assert record.composite == record.metacritic_score + record.user_score


async def test_ties_broken_by_discovery_order() -> None:
    """Test [170, 170, 150] added as X, Y, Z ranks X=1, Y=2, Z=3."""
    catalog = FakeCatalog([candidates(10, 20, 30)])
    enricher = FakeEnricher({10: (90, 80.0), 20: (80, 90.0), 30: (75, 75.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(3)

    ranks = {r.app_id: r.rank for r in aggregator.ranked}
    assert ranks == {10: 1, 20: 2, 30: 3}


async def test_ties_across_batches_favor_earlier_record() -> None:
    """Test a later record tying an existing one ranks after it."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (80, 90.0), 2: (90, 80.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(1)
    await aggregator.load_next_batch(1)

    assert [(r.app_id, r.rank) for r in aggregator.ranked] == [(1, 1), (2, 2)]


async def test_growth_renumbers_existing_ranks() -> None:
    """Test a better late arrival pushes existing records down."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (70, 70.0), 2: (95, 95.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(1)
    first = aggregator.ranked[0]
    assert first.rank == 1

    await aggregator.load_next_batch(1)
    assert first.rank == 2
    _assert_dense(aggregator.ranked)


# --- Aggregator: idempotence ---


async def test_zero_batch_is_noop() -> None:
    """Test batch_size=0 touches nothing, not even the network."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (80, 80.0)})
    aggregator = RankingAggregator(catalog, enricher)

    result = await aggregator.load_next_batch(0)

    assert result.attempted == 0
    assert result.added == 0
    assert aggregator.ranked == ()
    assert catalog.requested == []
    assert enricher.calls == []


async def test_ineligible_only_batch_leaves_ranks_unchanged() -> None:
    """Test a batch of only ineligible items changes nothing."""
    catalog = FakeCatalog([candidates(1, 2, 3, 4, 5)])
    enricher = FakeEnricher({1: (80, 80.0), 2: (70, 75.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(2)
    before = [(r.app_id, r.rank) for r in aggregator.ranked]

    result = await aggregator.load_next_batch(3)

    assert result.attempted == 3
    assert result.added == 0
    assert len(result.ineligible) == 3
    assert [(r.app_id, r.rank) for r in aggregator.ranked] == before


# --- Aggregator: batch policy ---


async def test_attempt_policy_can_add_fewer_than_batch_size() -> None:
    """Test ATTEMPTS counts enrichment calls, not successes."""
    catalog = FakeCatalog([candidates(1, 2, 3, 4, 5, 6)])
    enricher = FakeEnricher({1: (80, 80.0), 3: (70, 70.0)}, failing={4})
    aggregator = RankingAggregator(catalog, enricher, policy=BatchPolicy.ATTEMPTS)

    result = await aggregator.load_next_batch(4)

    assert result.attempted == 4
    assert result.added == 2
    assert len(result.ineligible) == 1
    assert len(result.failed) == 1
    assert result.failed[0].app_id == 4
    assert enricher.calls == [1, 2, 3, 4]
    assert aggregator.cursor.next_index == 4


async def test_success_policy_fills_batch_across_pages() -> None:
    """Test SUCCESSES keeps consuming (and paging) until N records are added."""
    catalog = FakeCatalog([candidates(1, 2, 3), candidates(4, 5, 6)])
    enricher = FakeEnricher({1: (80, 80.0), 4: (70, 70.0), 6: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher, policy=BatchPolicy.SUCCESSES)

    result = await aggregator.load_next_batch(3)

    assert result.added == 3
    assert result.attempted == 6
    assert result.pages_fetched == 2
    assert aggregator.pages_loaded == 2
    assert [r.app_id for r in aggregator.ranked] == [6, 1, 4]


async def test_success_policy_stops_when_exhausted() -> None:
    """Test SUCCESSES returns short when the catalog runs out."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (80, 80.0)})
    aggregator = RankingAggregator(catalog, enricher, policy=BatchPolicy.SUCCESSES)

    result = await aggregator.load_next_batch(5)

    assert result.added == 1
    assert result.has_more is False
    assert aggregator.has_more() is False


# --- Aggregator: pagination ---


async def test_pages_materialize_lazily() -> None:
    """Test a new page is fetched only once the previous one is consumed."""
    catalog = FakeCatalog([candidates(1, 2), candidates(3, 4)])
    enricher = FakeEnricher({1: (80, 80.0), 2: (80, 70.0), 3: (70, 70.0), 4: (60, 60.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(2)
    assert catalog.requested == [1]
    assert aggregator.cursor.page_number == 1

    await aggregator.load_next_batch(2)
    assert catalog.requested == [1, 2]
    assert aggregator.cursor.page_number == 2
    assert aggregator.cursor.next_index == 4
    assert len(aggregator.ranked) == 4


async def test_has_more_until_catalog_exhausted() -> None:
    """Test has_more turns false after an empty page."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (80, 80.0), 2: (70, 70.0)})
    aggregator = RankingAggregator(catalog, enricher)

    assert aggregator.has_more() is True
    await aggregator.load_next_batch(2)
    assert aggregator.has_more() is True  # Source has not signalled the end yet

    result = await aggregator.load_next_batch(2)
    assert result.attempted == 0
    assert aggregator.has_more() is False
    assert len(aggregator.ranked) == 2


async def test_max_pages_bounds_the_universe() -> None:
    """Test the source bound marks exhaustion without another request."""
    catalog = FakeCatalog([candidates(1), candidates(2)], max_pages=1)
    enricher = FakeEnricher({1: (80, 80.0), 2: (70, 70.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(5)

    assert aggregator.has_more() is False
    assert catalog.requested == [1]


async def test_duplicate_candidates_are_skipped() -> None:
    """Test an id already ranked is not enriched again."""
    catalog = FakeCatalog([candidates(1, 2), candidates(2, 3)])
    enricher = FakeEnricher({1: (80, 80.0), 2: (70, 70.0), 3: (60, 60.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(10)

    assert enricher.calls == [1, 2, 3]
    assert [r.app_id for r in aggregator.ranked] == [1, 2, 3]


# --- Aggregator: batch failure ---


async def test_page_failure_leaves_ranked_list_unchanged() -> None:
    """Test a failed page fetch keeps a 7-item list at exactly 7 items."""
    catalog = FakeCatalog(
        [candidates(1, 2, 3, 4, 5, 6, 7), candidates(8, 9)],
        failing_pages={2},
    )
    enricher = FakeEnricher({i: (60 + i, 50.0 + i) for i in range(1, 10)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(7)
    before = [(r.app_id, r.rank) for r in aggregator.ranked]
    cursor_before = aggregator.cursor

    with pytest.raises(CatalogError):
        await aggregator.load_next_batch(3)

    assert len(aggregator.ranked) == 7
    assert [(r.app_id, r.rank) for r in aggregator.ranked] == before
    assert aggregator.cursor == cursor_before
    assert aggregator.pages_loaded == 1


async def test_mid_batch_failure_discards_partial_batch() -> None:
    """Test records enriched before a page failure are not committed."""
    catalog = FakeCatalog([candidates(1, 2, 3), candidates(4, 5)], failing_pages={2})
    enricher = FakeEnricher({i: (80, 80.0 - i) for i in range(1, 6)})
    aggregator = RankingAggregator(catalog, enricher)

    with pytest.raises(CatalogError):
        await aggregator.load_next_batch(5)

    assert enricher.calls == [1, 2, 3]
    assert aggregator.ranked == ()
    assert aggregator.cursor.next_index == 0
    assert aggregator.has_more() is True


async def test_batch_can_be_retried_after_failure() -> None:
    """Test the caller may retry once the catalog recovers."""
    catalog = FakeCatalog([candidates(1), candidates(2)], failing_pages={2})
    enricher = FakeEnricher({1: (80, 80.0), 2: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_next_batch(1)
    with pytest.raises(CatalogError):
        await aggregator.load_next_batch(1)

    catalog.failing_pages.clear()
    result = await aggregator.load_next_batch(1)

    assert result.added == 1
    assert [r.app_id for r in aggregator.ranked] == [2, 1]


# --- Aggregator: reset ---


async def test_reset_clears_everything() -> None:
    """Test reset discards records, cursor and pages together."""
    catalog = FakeCatalog([candidates(1, 2)])
    enricher = FakeEnricher({1: (80, 80.0), 2: (70, 70.0)})
    aggregator = RankingAggregator(catalog, enricher)
    await aggregator.load_next_batch(2)

    aggregator.reset()

    assert aggregator.ranked == ()
    assert aggregator.pages_loaded == 0
    assert aggregator.cursor.page_number == 1
    assert aggregator.cursor.next_index == 0
    assert aggregator.has_more() is True


# --- Aggregator: bulk mode ---


async def test_load_all_ranks_once() -> None:
    """Test bulk load enriches every candidate and ranks the survivors."""
    catalog = FakeCatalog([], top=candidates(1, 2, 3, 4))
    enricher = FakeEnricher({1: (70, 70.0), 2: (90, 90.0), 4: (80, 80.0)})
    aggregator = RankingAggregator(catalog, enricher, paged=False, bulk_limit=100)

    result = await aggregator.load_all()

    assert result.attempted == 4
    assert result.added == 3
    assert [o.status for o in result.outcomes].count(OutcomeStatus.INELIGIBLE) == 1
    assert [r.app_id for r in aggregator.ranked] == [2, 4, 1]
    _assert_dense(aggregator.ranked)
    assert aggregator.has_more() is False


async def test_load_all_respects_bulk_limit() -> None:
    """Test the listing is sliced to bulk_limit."""
    catalog = FakeCatalog([], top=candidates(1, 2, 3))
    enricher = FakeEnricher({1: (70, 70.0), 2: (90, 90.0), 3: (80, 80.0)})
    aggregator = RankingAggregator(catalog, enricher, bulk_limit=2)

    await aggregator.load_all()

    assert enricher.calls == [1, 2]


async def test_load_all_failure_keeps_state() -> None:
    """Test a failed bulk listing leaves the existing list intact."""
    catalog = FakeCatalog([candidates(1)], top=candidates(2), failing_pages={0})
    enricher = FakeEnricher({1: (80, 80.0), 2: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher)
    await aggregator.load_next_batch(1)

    with pytest.raises(CatalogError):
        await aggregator.load_all()

    assert [r.app_id for r in aggregator.ranked] == [1]


async def test_bulk_batches_never_page() -> None:
    """Test bulk mode fetches the top slice once and then stops."""
    catalog = FakeCatalog([candidates(9)], top=candidates(1, 2, 3))
    enricher = FakeEnricher({1: (70, 70.0), 2: (90, 90.0), 3: (80, 80.0), 9: (99, 99.0)})
    aggregator = RankingAggregator(catalog, enricher, paged=False)

    await aggregator.load_next_batch(2)
    await aggregator.load_next_batch(2)
    result = await aggregator.load_next_batch(2)

    assert catalog.requested == [0]
    assert result.attempted == 0
    assert [r.app_id for r in aggregator.ranked] == [2, 3, 1]
    assert aggregator.has_more() is False


async def test_bulk_load_leaves_paged_cursor_at_start() -> None:
    """Test the top listing is not counted as a catalog page."""
    catalog = FakeCatalog([candidates(9)], top=candidates(1, 2))
    enricher = FakeEnricher({1: (70, 70.0), 2: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher)

    await aggregator.load_all()

    assert aggregator.pages_loaded == 0
    assert aggregator.cursor.page_number == 1
    assert aggregator.has_more() is False


async def test_bulk_batches_leave_paged_cursor_at_start() -> None:
    """Test bulk-mode batches do not advance the paged cursor."""
    catalog = FakeCatalog([candidates(9)], top=candidates(1, 2))
    enricher = FakeEnricher({1: (70, 70.0), 2: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher, paged=False)

    await aggregator.load_next_batch(5)

    assert [r.app_id for r in aggregator.ranked] == [2, 1]
    assert aggregator.pages_loaded == 0


# --- Aggregator: overlapping calls ---


class GatedEnricher(FakeEnricher):
    """FakeEnricher whose calls block until released and then yield once."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def enrich(self, app_id: int):
        self.started.set()
        await self.release.wait()
        await asyncio.sleep(0)
        return await super().enrich(app_id)


async def test_reset_during_batch_drops_the_batch() -> None:
    """Test a batch in flight at reset time never reaches the new session."""
    catalog = FakeCatalog([candidates(1, 2, 3)])
    enricher = GatedEnricher({1: (80, 80.0), 2: (70, 70.0), 3: (90, 90.0)})
    aggregator = RankingAggregator(catalog, enricher)

    task = asyncio.create_task(aggregator.load_next_batch(3))
    await enricher.started.wait()
    aggregator.reset()
    enricher.release.set()
    result = await task

    assert result.attempted == 3
    assert result.added == 0
    assert aggregator.ranked == ()
    assert aggregator.pages_loaded == 0
    assert aggregator.has_more() is True

    # The fresh session starts over from page 1
    await aggregator.load_next_batch(3)
    assert [r.app_id for r in aggregator.ranked] == [3, 1, 2]
    assert catalog.requested == [1, 1]


async def test_reset_during_bulk_load_drops_the_listing() -> None:
    """Test a bulk load in flight at reset time is discarded."""
    catalog = FakeCatalog([], top=candidates(1, 2))
    enricher = GatedEnricher({1: (80, 80.0), 2: (70, 70.0)})
    aggregator = RankingAggregator(catalog, enricher)

    task = asyncio.create_task(aggregator.load_all())
    await enricher.started.wait()
    aggregator.reset()
    enricher.release.set()
    result = await task

    assert result.added == 0
    assert aggregator.ranked == ()
    assert aggregator.has_more() is True


async def test_overlapping_batches_run_in_turn() -> None:
    """Test concurrent batch calls consume disjoint, in-order slices."""
    catalog = FakeCatalog([candidates(1, 2, 3, 4)])
    enricher = GatedEnricher({i: (80, 80.0 - i) for i in range(1, 5)})
    aggregator = RankingAggregator(catalog, enricher)

    first = asyncio.create_task(aggregator.load_next_batch(2))
    second = asyncio.create_task(aggregator.load_next_batch(2))
    enricher.release.set()
    results = await asyncio.gather(first, second)

    assert [[o.app_id for o in r.outcomes] for r in results] == [[1, 2], [3, 4]]
    assert enricher.calls == [1, 2, 3, 4]
    assert [r.app_id for r in aggregator.ranked] == [1, 2, 3, 4]
    _assert_dense(aggregator.ranked)
