"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from gamerank import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "gamerank"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "GameRank API",
        "version": __version__,
        "description": "Games ranked by combined Metacritic and user review scores",
        "docs": "/docs",
    }
