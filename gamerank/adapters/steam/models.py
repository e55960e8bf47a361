"""
Steam Store Models - Response types for appdetails and appreviews.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class MetacriticInfo(BaseModel):
    """Metacritic block of an appdetails payload."""

    score: float | None = None
    url: str | None = None

    @field_validator("score", mode="before")
    @classmethod
    def _numeric_only(cls, value: Any) -> Any:
        # "85", true and the like count as no score
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value


class AppDetails(BaseModel):
    """The `data` object of an appdetails entry."""

    name: str
    metacritic: MetacriticInfo | None = None
    header_image: str | None = None

    @property
    def metacritic_score(self) -> float | None:
        return self.metacritic.score if self.metacritic else None


class AppDetailsEntry(BaseModel):
    """One `{"<appid>": {...}}` entry of an appdetails response."""

    success: bool = False
    data: AppDetails | None = None


class ReviewSummary(BaseModel):
    """The `query_summary` object of an appreviews response."""

    total_positive: int = Field(default=0, ge=0)
    total_negative: int = Field(default=0, ge=0)
    total_reviews: int | None = None
    review_score_desc: str | None = None
