"""
Adapters - External service integrations.

All upstream API calls are wrapped here to isolate domains from response shapes.
"""

from .http import ApiRequest, JsonHttpClient
from .steam import SteamStoreClient
from .steamspy import SteamSpyClient

__all__ = [
    "ApiRequest",
    "JsonHttpClient",
    "SteamStoreClient",
    "SteamSpyClient",
]
