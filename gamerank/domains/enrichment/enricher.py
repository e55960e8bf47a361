"""
Game Enricher - Combines Steam store details and review tallies into records.

Flow per app id:
1. appdetails -> name, header image, Metacritic score (criterion A)
2. appreviews -> positive/negative tally -> user score % (criterion B)
3. composite = score(A, B)

Any missing piece makes the app ineligible. Transport failures are
isolated to the item: they are logged and returned as FAILED outcomes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from gamerank.config.errors import GameRankError
from gamerank.domains.ranking.scorer import score, user_score_percentage

from .models import EnrichedRecord, EnrichmentOutcome, IneligibleReason

if TYPE_CHECKING:
    from gamerank.adapters.steam import SteamStoreClient

logger = logging.getLogger(__name__)

__all__ = ["GameEnricher"]


class GameEnricher:
    """
    Enrichment client backed by the Steam store.

    No retries and no caching: every call repeats both fetches.

    Example:
        >>> enricher = GameEnricher(SteamStoreClient(JsonHttpClient()))
        >>> outcome = await enricher.enrich(620)
        >>> outcome.record.composite
        190.5
    """

    def __init__(
        self,
        store: SteamStoreClient,
        store_url: str = "https://store.steampowered.com/app",
    ) -> None:
        """
        Initialize enricher.

        Args:
            store: Steam store adapter
            store_url: Base for canonical item URLs (`<store_url>/<app_id>`)
        """
        self._store = store
        self._store_url = store_url.rstrip("/")

    async def enrich(self, app_id: int) -> EnrichmentOutcome:
        """Enrich one app; never raises for per-item problems."""
        try:
            return await self._enrich(app_id)
        except GameRankError as e:
            logger.warning("Enrichment failed for app %s: %s", app_id, e.message)
            return EnrichmentOutcome.failed(app_id, e.message, e.code)

    async def _enrich(self, app_id: int) -> EnrichmentOutcome:
        details = await self._store.app_details(app_id)
        if details is None:
            return self._ineligible(app_id, IneligibleReason.UNKNOWN_APP)

        metacritic = details.metacritic_score
        if metacritic is None:
            return self._ineligible(app_id, IneligibleReason.MISSING_METACRITIC)

        summary = await self._store.review_summary(app_id)
        if summary is None:
            return self._ineligible(app_id, IneligibleReason.MISSING_REVIEW_SUMMARY)

        user_score = user_score_percentage(summary.total_positive, summary.total_negative)
        if user_score is None:
            return self._ineligible(app_id, IneligibleReason.NO_REVIEWS)

        record = EnrichedRecord(
            app_id=app_id,
            name=details.name,
            metacritic_score=metacritic,
            user_score=user_score,
            composite=score(metacritic, user_score),
            image_url=details.header_image,
            store_url=f"{self._store_url}/{app_id}",
        )
        return EnrichmentOutcome.enriched(record)

    async def enrich_many(
        self,
        app_ids: Sequence[int],
        concurrency: int = 8,
    ) -> list[EnrichmentOutcome]:
        """
        Enrich concurrently with bounded fan-out.

        Args:
            app_ids: Apps to enrich
            concurrency: Maximum in-flight enrichments

        Returns:
            Outcomes in the same order as app_ids
        """
        semaphore = asyncio.Semaphore(max(1, concurrency))

        async def _bounded(app_id: int) -> EnrichmentOutcome:
            async with semaphore:
                return await self.enrich(app_id)

        return list(await asyncio.gather(*(_bounded(app_id) for app_id in app_ids)))

    @staticmethod
    def _ineligible(app_id: int, reason: IneligibleReason) -> EnrichmentOutcome:
        logger.debug("App %s ineligible: %s", app_id, reason.value)
        return EnrichmentOutcome.ineligible(app_id, reason)
