"""
Search Domain - Name search over the ranked list with catalog fallback.

This domain handles:
- Local substring search against ranked records
- Budgeted fallback scan of unfetched catalog pages
- Relative rank computation without mutating the ranked list
"""

from .models import HitSource, SearchHit, SearchResults
from .contracts import SearchIndex
from .search_index import RankedSearchIndex, normalize_query, relative_hits

__all__ = [
    # Contracts
    "SearchIndex",
    # Models
    "HitSource",
    "SearchHit",
    "SearchResults",
    # Implementations
    "RankedSearchIndex",
    "normalize_query",
    "relative_hits",
]
