"""
API Routes.
"""

from . import health, rankings, search

__all__ = ["health", "rankings", "search"]
