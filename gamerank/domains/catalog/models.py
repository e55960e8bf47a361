"""
Catalog Models - Data types for catalog domain.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Candidate(BaseModel):
    """An app discovered in the catalog, before enrichment."""

    app_id: int
    name: str = ""

    model_config = {"frozen": True}

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on the catalog name."""
        return needle in self.name.casefold()


class PaginationCursor(BaseModel):
    """Progress through the paged catalog."""

    page_number: int = Field(default=1, ge=1)
    next_index: int = Field(default=0, ge=0)
