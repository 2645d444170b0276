"""
FastAPI middleware for observability.

CorrelationMiddleware binds the X-Correlation-ID for the request and echoes
it on the response; RequestLoggingMiddleware logs one line per request with
status and latency.

Dependencies: fastapi, starlette, convoquota.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from convoquota.observability.correlation import correlation_scope
from convoquota.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """
        Time the downstream handler and log its outcome.

        Health checks are logged at DEBUG to keep access logs readable.
        """
        started = time.perf_counter()
        path = request.url.path
        level = logging.DEBUG if "/health" in path else logging.INFO

        try:
            response = await call_next(request)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{request.method} {path} - unhandled exception",
                e,
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        log_with_context(
            logger,
            level,
            f"{request.method} {path} - {response.status_code}",
            method=request.method,
            path=path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            client_host=request.client.host if request.client else None,
        )
        return response
