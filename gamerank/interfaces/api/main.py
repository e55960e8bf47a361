"""
FastAPI Main Application - JSON API entry point.

Run with: uvicorn gamerank.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gamerank import __version__
from gamerank.config import get_settings

from .deps import cleanup_services, init_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RequestIDMiddleware,
)
from .routes import health, rankings, search

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting GameRank API...")
    logger.info("  Relay: %s", settings.relay_url or "none")
    logger.info("  Batch policy: %s", settings.batch_policy)

    await init_services()

    yield

    logger.info("Shutting down GameRank API...")
    await cleanup_services()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="GameRank API",
        description="Games ranked by combined Metacritic and user review scores",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Middleware (last added = outermost; request ID is set before errors are mapped)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LatencyMiddleware)
    app.add_middleware(RequestIDMiddleware)

    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]
    if settings.api_debug:
        allowed_origins.append("http://localhost:*")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(rankings.router, prefix="/api/rankings", tags=["Rankings"])
    app.include_router(search.router, prefix="/api/search", tags=["Search"])

    return app


# Create app instance
app = create_app()
