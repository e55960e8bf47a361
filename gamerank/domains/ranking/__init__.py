"""
Ranking Domain - Composite scoring and the global ranked list.

This domain handles:
- Composite score calculation
- Incremental batch loading with per-item failure tolerance
- Stable, dense re-ranking as the list grows
- One-shot bulk loading
"""

from .scorer import score, user_score_percentage
from .models import BatchPolicy, BatchResult, RankingState
from .contracts import Aggregator
from .aggregator import RankingAggregator, rank_in_place

__all__ = [
    # Contracts
    "Aggregator",
    # Models
    "BatchPolicy",
    "BatchResult",
    "RankingState",
    # Scoring
    "score",
    "user_score_percentage",
    # Implementations
    "RankingAggregator",
    "rank_in_place",
]
