"""
SteamSpy Adapter - Catalog listings (paged "all" and bulk "top100forever").
"""

from .client import SteamSpyApp, SteamSpyClient

__all__ = ["SteamSpyClient", "SteamSpyApp"]
