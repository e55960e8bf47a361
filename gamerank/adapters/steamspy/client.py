"""
SteamSpy Client - Catalog listing endpoints.

Responses are JSON objects keyed by appid; insertion order is the
listing order and is preserved.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from gamerank.adapters.http import ApiRequest, JsonHttpClient
from gamerank.config.errors import TransportError

logger = logging.getLogger(__name__)

__all__ = ["SteamSpyApp", "SteamSpyClient"]


class SteamSpyApp(BaseModel):
    """Minimal catalog entry."""

    appid: int
    name: str = ""
    developer: str | None = None
    positive: int | None = None
    negative: int | None = None


class SteamSpyClient:
    """
    SteamSpy API client.

    Example:
        >>> spy = SteamSpyClient(JsonHttpClient())
        >>> apps = await spy.all_page(0)
    """

    def __init__(
        self,
        http: JsonHttpClient,
        base_url: str = "https://steamspy.com/api.php",
    ) -> None:
        self._http = http
        self.base_url = base_url

    async def all_page(self, page: int) -> list[SteamSpyApp]:
        """
        Fetch one page of the full catalog.

        Args:
            page: Zero-based SteamSpy page index

        Raises:
            TransportError: On HTTP/network failure or malformed payload
        """
        request = ApiRequest(endpoint=self.base_url, params={"request": "all", "page": page})
        return self._parse_listing(await self._http.get_json(request), request)

    async def top100_forever(self) -> list[SteamSpyApp]:
        """Fetch the all-time top 100 by owners."""
        request = ApiRequest(endpoint=self.base_url, params={"request": "top100forever"})
        return self._parse_listing(await self._http.get_json(request), request)

    @staticmethod
    def _parse_listing(payload: Any, request: ApiRequest) -> list[SteamSpyApp]:
        # Out-of-range pages come back as {} or []
        if not payload:
            return []
        if not isinstance(payload, dict):
            raise TransportError(
                "Unexpected SteamSpy payload",
                details={"url": request.url, "type": type(payload).__name__},
            )

        apps: list[SteamSpyApp] = []
        for key, raw in payload.items():
            if not isinstance(raw, dict):
                continue
            try:
                apps.append(SteamSpyApp.model_validate({"appid": key, **raw}))
            except ValidationError:
                logger.debug("Skipping malformed SteamSpy entry %s", key)
        return apps
