"""Logging context middleware for request correlation."""

import time

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.director.core.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# Health and metrics endpoints get no completion line
QUIET_PATHS = frozenset({"/health", "/metrics"})


async def logging_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind request_id, method and path to log context, then log the outcome.

    Any automation context left bound by a run is cleared with the rest.
    """
    clear_request_context()
    bind_request_context(correlation_id.get(), method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        if request.url.path not in QUIET_PATHS:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        return response
    finally:
        clear_request_context()
