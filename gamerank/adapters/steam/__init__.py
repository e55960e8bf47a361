"""
Steam Store Adapter - App details and review summaries.
"""

from .client import SteamStoreClient
from .models import AppDetails, AppDetailsEntry, MetacriticInfo, ReviewSummary

__all__ = [
    "SteamStoreClient",
    "AppDetails",
    "AppDetailsEntry",
    "MetacriticInfo",
    "ReviewSummary",
]
