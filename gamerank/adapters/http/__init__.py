"""
HTTP Adapter - JSON transport with optional cross-origin relay.

This is the ONLY place that talks to the network.
"""

from .client import ApiRequest, JsonHttpClient

__all__ = ["ApiRequest", "JsonHttpClient"]
