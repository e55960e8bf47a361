"""
Catalog Domain - Lazy discovery of candidate apps.

This domain handles:
- Paged candidate listings with a bounded universe
- One-shot bulk listings (top N)
- Page-level failure reporting (CatalogError)
"""

from .models import Candidate, PaginationCursor
from .contracts import CandidateSource
from .source import SteamSpyCatalog

__all__ = [
    # Contracts
    "CandidateSource",
    # Models
    "Candidate",
    "PaginationCursor",
    # Implementations
    "SteamSpyCatalog",
]
