"""
GameRank - Incremental game ranking by combined critic and player scores.

Example:
    >>> from gamerank.domains.session import RankingSession
    >>> session = RankingSession.from_settings()
    >>> await session.aggregator.load_next_batch(10)
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
