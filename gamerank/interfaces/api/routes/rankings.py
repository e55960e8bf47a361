"""
Ranking Routes - Incremental and bulk loading of the ranked list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gamerank.domains.ranking import BatchResult
from gamerank.domains.session import RankingSession
from gamerank.interfaces.api.deps import get_ranking_session

from .schemas import BatchRequest, BatchResponse, BatchSummary, RankedGameItem, RankingResponse

router = APIRouter()


def _ranking(session: RankingSession) -> RankingResponse:
    aggregator = session.aggregator
    games = [RankedGameItem.from_record(r) for r in aggregator.ranked]
    return RankingResponse(
        games=games,
        total=len(games),
        pages_loaded=aggregator.pages_loaded,
        has_more=aggregator.has_more(),
    )


def _batch_response(session: RankingSession, result: BatchResult) -> BatchResponse:
    ranking = _ranking(session)
    return BatchResponse(
        **ranking.model_dump(),
        batch=BatchSummary(
            attempted=result.attempted,
            added=result.added,
            ineligible=len(result.ineligible),
            failed=len(result.failed),
            pages_fetched=result.pages_fetched,
        ),
    )


@router.get("", response_model=RankingResponse)
async def get_rankings(session: RankingSession = Depends(get_ranking_session)):
    """Current ranked list, rank-ascending."""
    return _ranking(session)


@router.post("/reset", response_model=RankingResponse)
async def reset_rankings(session: RankingSession = Depends(get_ranking_session)):
    """Discard the ranked list and start a fresh session."""
    session.reset()
    return _ranking(session)


@router.post("/batch", response_model=BatchResponse)
async def load_batch(
    request: BatchRequest,
    session: RankingSession = Depends(get_ranking_session),
):
    """
    Load the next batch of candidates.

    - **batch_size**: Attempts or successes, depending on the configured policy

    A catalog failure returns 502 and leaves the ranked list unchanged.
    """
    result = await session.aggregator.load_next_batch(request.batch_size)
    return _batch_response(session, result)


@router.post("/load-all", response_model=BatchResponse)
async def load_all(session: RankingSession = Depends(get_ranking_session)):
    """Replace the session with one bulk-loaded top listing."""
    result = await session.aggregator.load_all()
    return _batch_response(session, result)
