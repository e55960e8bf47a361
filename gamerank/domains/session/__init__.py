"""
Session Domain - Wires adapters and domains into one ranking session.
"""

from .session import RankingSession

__all__ = ["RankingSession"]
