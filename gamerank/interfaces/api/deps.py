"""
API Dependencies - Dependency injection for FastAPI routes.

Provides the process-wide ranking session.
"""

from __future__ import annotations

from functools import lru_cache

from gamerank.config import get_settings
from gamerank.domains.session import RankingSession


@lru_cache
def get_ranking_session() -> RankingSession:
    """Get ranking session singleton."""
    return RankingSession.from_settings(get_settings())


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    get_ranking_session()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    session = get_ranking_session()
    await session.close()
    get_ranking_session.cache_clear()
