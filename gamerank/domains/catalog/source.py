"""
SteamSpy Catalog - Candidate source over SteamSpy listings.

Page numbers are 1-based here; SteamSpy's `request=all` pages are 0-based.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gamerank.config.errors import CatalogError, TransportError

from .models import Candidate, PaginationCursor

if TYPE_CHECKING:
    from gamerank.adapters.steamspy import SteamSpyApp, SteamSpyClient

logger = logging.getLogger(__name__)

__all__ = ["SteamSpyCatalog"]


class SteamSpyCatalog:
    """
    Paged candidate source.

    Example:
        >>> catalog = SteamSpyCatalog(SteamSpyClient(JsonHttpClient()), max_pages=5)
        >>> page = await catalog.first_page()
    """

    def __init__(self, client: SteamSpyClient, max_pages: int = 20) -> None:
        """
        Initialize catalog.

        Args:
            client: SteamSpy adapter
            max_pages: Upper bound on pages ever requested (bounded universe)
        """
        self._client = client
        self.max_pages = max_pages
        self.pages_materialized = 0

    async def first_page(self) -> list[Candidate]:
        return await self.fetch_page(1)

    async def next_page(self, cursor: PaginationCursor) -> list[Candidate]:
        return await self.fetch_page(cursor.page_number + 1)

    async def fetch_page(self, page_number: int) -> list[Candidate]:
        """
        Fetch a 1-based catalog page.

        Raises:
            CatalogError: When the page request fails
        """
        if page_number > self.max_pages:
            logger.debug("Page %d beyond max_pages=%d", page_number, self.max_pages)
            return []

        try:
            apps = await self._client.all_page(page_number - 1)
        except TransportError as e:
            raise CatalogError(
                f"Catalog page {page_number} failed: {e.message}",
                details={"page": page_number, **e.details},
            ) from e

        self.pages_materialized += 1
        logger.info("Catalog page %d: %d candidates", page_number, len(apps))
        return _to_candidates(apps)

    async def top_slice(self, limit: int) -> list[Candidate]:
        """Fetch the all-time top list and keep the first `limit` entries."""
        try:
            apps = await self._client.top100_forever()
        except TransportError as e:
            raise CatalogError(
                f"Top listing failed: {e.message}",
                details=e.details,
            ) from e

        self.pages_materialized += 1
        return _to_candidates(apps[:limit])


def _to_candidates(apps: list[SteamSpyApp]) -> list[Candidate]:
    return [Candidate(app_id=app.appid, name=app.name) for app in apps]
