"""
CLI Interface - Command-line tools for GameRank.

Provides commands for:
- Bulk top-list ranking
- Incremental browsing in batches
- Name search with catalog fallback
- Serving the API
"""

from .main import app, main

__all__ = ["app", "main"]
