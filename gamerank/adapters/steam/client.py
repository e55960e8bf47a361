"""
Steam Store Client - Fetches per-app details and review tallies.

Both calls go through JsonHttpClient, so the relay (if any) applies uniformly.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from gamerank.adapters.http import ApiRequest, JsonHttpClient
from gamerank.config.errors import EnrichmentError

from .models import AppDetails, AppDetailsEntry, ReviewSummary

logger = logging.getLogger(__name__)

__all__ = ["SteamStoreClient"]


class SteamStoreClient:
    """
    Steam store API client.

    Example:
        >>> store = SteamStoreClient(JsonHttpClient())
        >>> details = await store.app_details(620)
        >>> summary = await store.review_summary(620)
    """

    def __init__(
        self,
        http: JsonHttpClient,
        base_url: str = "https://store.steampowered.com",
    ) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")

    def details_request(self, app_id: int) -> ApiRequest:
        return ApiRequest(
            endpoint=f"{self.base_url}/api/appdetails",
            params={"appids": app_id},
        )

    def reviews_request(self, app_id: int) -> ApiRequest:
        return ApiRequest(
            endpoint=f"{self.base_url}/appreviews/{app_id}",
            params={"json": 1, "purchase_type": "all", "language": "all"},
        )

    async def app_details(self, app_id: int) -> AppDetails | None:
        """
        Fetch store details for an app.

        Returns:
            Details, or None when the store reports the id as unknown/unsuccessful

        Raises:
            TransportError: On HTTP/network failure
            EnrichmentError: When the payload does not have the expected shape
        """
        payload = await self._http.get_json(self.details_request(app_id))
        raw = payload.get(str(app_id)) if isinstance(payload, dict) else None
        if raw is None:
            return None

        entry = _parse(AppDetailsEntry, raw, app_id, "appdetails")
        if not entry.success or entry.data is None:
            return None
        return entry.data

    async def review_summary(self, app_id: int) -> ReviewSummary | None:
        """
        Fetch the positive/negative review tally for an app.

        Returns:
            Summary, or None when the response carries no query_summary
        """
        payload = await self._http.get_json(self.reviews_request(app_id))
        raw = payload.get("query_summary") if isinstance(payload, dict) else None
        if raw is None:
            return None
        return _parse(ReviewSummary, raw, app_id, "appreviews")


def _parse(model: type[Any], raw: Any, app_id: int, endpoint: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise EnrichmentError(
            f"Malformed {endpoint} payload for app {app_id}",
            details={"app_id": app_id, "errors": e.error_count()},
        ) from e
