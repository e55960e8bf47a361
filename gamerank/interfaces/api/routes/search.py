"""
Search Routes - Name search over the ranked list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from gamerank.domains.session import RankingSession
from gamerank.interfaces.api.deps import get_ranking_session

from .schemas import RankedGameItem

router = APIRouter()


class SearchHitItem(RankedGameItem):
    """Ranked row plus where it came from."""

    source: str  # "ranked" or "fallback"


class SearchResponse(BaseModel):
    """Search response."""

    query: str
    results: list[SearchHitItem]
    total: int
    fallback_used: bool
    pages_scanned: int


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query(default="", max_length=200, description="Game name fragment"),
    session: RankingSession = Depends(get_ranking_session),
):
    """
    Search games by name.

    - **q**: Case-insensitive name fragment; empty returns the full ranked list

    Fallback matches carry the rank they would have if inserted.
    """
    results = await session.search_index.search(q)

    items = [
        SearchHitItem(
            **RankedGameItem.from_record(hit.record, rank=hit.rank).model_dump(),
            source=hit.source.value,
        )
        for hit in results.hits
    ]
    return SearchResponse(
        query=results.query,
        results=items,
        total=len(items),
        fallback_used=results.fallback_used,
        pages_scanned=results.pages_scanned,
    )
