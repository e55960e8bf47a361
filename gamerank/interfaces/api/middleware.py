"""
API Middleware - Cross-cutting handling for every GameRank request.

Stack (outermost first): request id -> latency log -> error mapping.
Upstream trouble (SteamSpy or the store) is reported as 502 so callers can
tell it apart from a bug here.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from gamerank.config.errors import ErrorCode, GameRankError

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.SEARCH_INVALID_QUERY: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CATALOG_FETCH_FAILED: 502,
    ErrorCode.UPSTREAM_REQUEST_FAILED: 502,
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Log one line per request; batch and search calls can be slow upstream."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        logger.info(
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            _request_id(request),
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render GameRankError (and anything unexpected) as `{error, request_id}` JSON."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except GameRankError as e:
            status = _error_code_to_status(e.code)
            level = logging.WARNING if status == 502 else logging.ERROR
            logger.log(level, "%s on %s: %s %s", e.code.value, request.url.path, e.message, e.details)
            return _error_response(status, e.to_dict(), _request_id(request))
        except Exception:
            logger.exception("Unhandled error on %s [%s]", request.url.path, _request_id(request))
            error = {
                "code": ErrorCode.INTERNAL_ERROR.value,
                "message": "Internal server error",
                "details": {},
            }
            return _error_response(500, error, _request_id(request))


def _error_response(status: int, error: dict[str, Any], request_id: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": error, "request_id": request_id})


def _error_code_to_status(code: ErrorCode) -> int:
    """HTTP status for an error code; unmapped codes are 500."""
    return _STATUS_BY_CODE.get(code, 500)
