"""
Ranking Session - One aggregator, its search index and shared HTTP client.

A session is the unit of reset: a fresh top-level load discards the
ranked list and cursor together.
"""

from __future__ import annotations

import logging

from gamerank.adapters.http import JsonHttpClient
from gamerank.adapters.steam import SteamStoreClient
from gamerank.adapters.steamspy import SteamSpyClient
from gamerank.config import Settings, get_settings
from gamerank.domains.catalog import SteamSpyCatalog
from gamerank.domains.enrichment import GameEnricher
from gamerank.domains.ranking import BatchPolicy, RankingAggregator
from gamerank.domains.search import RankedSearchIndex

logger = logging.getLogger(__name__)

__all__ = ["RankingSession"]


class RankingSession:
    """
    Ready-to-use aggregation session.

    Example:
        >>> session = RankingSession.from_settings()
        >>> await session.aggregator.load_next_batch(10)
        >>> results = await session.search_index.search("half-life")
        >>> await session.close()
    """

    def __init__(
        self,
        http: JsonHttpClient,
        catalog: SteamSpyCatalog,
        enricher: GameEnricher,
        aggregator: RankingAggregator,
        search_index: RankedSearchIndex,
    ) -> None:
        self.http = http
        self.catalog = catalog
        self.enricher = enricher
        self.aggregator = aggregator
        self.search_index = search_index

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        paged: bool = True,
        http: JsonHttpClient | None = None,
    ) -> RankingSession:
        """
        Build a session from application settings.

        Args:
            settings: Settings (defaults to get_settings())
            paged: False selects bulk mode for the aggregator
            http: Pre-built HTTP client (tests inject a mock transport)
        """
        settings = settings or get_settings()
        http = http or JsonHttpClient(
            relay_url=settings.relay_url,
            timeout=settings.http_timeout_seconds,
        )

        catalog = SteamSpyCatalog(
            SteamSpyClient(http, base_url=settings.steamspy_url),
            max_pages=settings.catalog_max_pages,
        )
        enricher = GameEnricher(
            SteamStoreClient(http, base_url=settings.store_api_url),
            store_url=settings.store_url,
        )
        aggregator = RankingAggregator(
            catalog,
            enricher,
            policy=BatchPolicy(settings.batch_policy),
            paged=paged,
            bulk_limit=settings.bulk_limit,
            concurrency=settings.enrichment_concurrency,
        )
        search_index = RankedSearchIndex(
            aggregator,
            catalog,
            enricher,
            page_budget=settings.search_page_budget,
            result_budget=settings.search_result_budget,
        )

        logger.debug(
            "Session created: paged=%s relay=%s policy=%s",
            paged,
            bool(settings.relay_url),
            settings.batch_policy,
        )
        return cls(http, catalog, enricher, aggregator, search_index)

    def reset(self) -> None:
        """Start a fresh top-level load."""
        self.aggregator.reset()

    async def close(self) -> None:
        await self.http.close()
