"""
Scorer - Composite ranking value.

The composite is an unweighted sum of two roughly 0-100 scales
(Metacritic and user review percentage). No normalization is applied.
"""

from __future__ import annotations

__all__ = ["score", "user_score_percentage"]


def score(metacritic_score: float, user_score: float) -> float:
    """Combine critic and player scores into one ranking value."""
    return metacritic_score + user_score


def user_score_percentage(positive: int, negative: int) -> float | None:
    """
    Share of positive reviews as a percentage.

    Returns:
        0-100 percentage, or None when there are no reviews (undefined ratio)
    """
    total = positive + negative
    if total == 0:
        return None
    return positive / total * 100
