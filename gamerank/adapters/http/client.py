"""
JSON HTTP Client - Async GET transport shared by all upstream adapters.

Features:
- Structured requests (endpoint + params), no ad-hoc URL strings at call sites
- Optional relay: every request becomes GET <relay>?url=<target>
- Non-success status and network errors surface as TransportError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from gamerank.config.errors import TransportError

logger = logging.getLogger(__name__)

__all__ = ["ApiRequest", "JsonHttpClient"]


class ApiRequest(BaseModel):
    """Outbound GET request."""

    endpoint: str
    params: dict[str, str | int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def url(self) -> str:
        """Fully-qualified target URL including the query string."""
        return str(httpx.URL(self.endpoint, params=self.params))


class JsonHttpClient:
    """
    Async JSON client with relay support.

    The relay is a pure pass-through: callers build the same ApiRequest
    whether or not one is configured.

    Example:
        >>> client = JsonHttpClient(relay_url="https://relay.example.dev/")
        >>> data = await client.get_json(
        ...     ApiRequest(endpoint="https://steamspy.com/api.php", params={"request": "all"})
        ... )
    """

    def __init__(
        self,
        relay_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            relay_url: Optional relay base URL that accepts a `url` parameter
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.relay_url = relay_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    def resolve(self, request: ApiRequest) -> ApiRequest:
        """Return the request actually sent on the wire."""
        if not self.relay_url:
            return request
        return ApiRequest(endpoint=self.relay_url, params={"url": request.url})

    async def get_json(self, request: ApiRequest) -> Any:
        """
        Fetch and decode a JSON document.

        Args:
            request: Target request (relay is applied here)

        Returns:
            Decoded JSON body

        Raises:
            TransportError: Non-success status, network failure or invalid JSON
        """
        client = await self._get_client()
        wire = self.resolve(request)

        try:
            response = await client.get(wire.endpoint, params=wire.params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
                details={"url": request.url, "status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request failed: {e}",
                details={"url": request.url},
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Response body is not valid JSON",
                details={"url": request.url},
            ) from e

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
