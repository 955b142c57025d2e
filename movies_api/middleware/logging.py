"""Access logging with correlation IDs."""

import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from movies_api.auth.api_key import API_KEY_HEADER
from movies_api.logging.config import get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Request-ID"


def resolve_correlation_id(request: Request) -> str:
    """
    Return the request's correlation ID.

    An ID already placed on request.state by an outer middleware wins, then
    the client's X-Request-ID header, then a fresh UUID4.
    """
    existing = getattr(request.state, "correlation_id", None)
    if existing:
        return existing
    return request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    One "started" and one "completed" (or "failed") record per request.

    The x-api-key value is never written; records only say whether a key
    was sent and whether it authenticated.
    """

    def _base_context(self, request: Request) -> dict[str, Any]:
        return {
            "method": request.method,
            "path": request.url.path,
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = resolve_correlation_id(request)
        request.state.correlation_id = correlation_id
        base = self._base_context(request)

        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "context": {
                    **base,
                    "query_params": dict(request.query_params),
                    "client_host": request.client.host if request.client else None,
                    "has_api_key": API_KEY_HEADER in request.headers,
                },
            },
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            # The traceback is written once, by the 500 handler
            logger.error(
                "Request failed with exception",
                extra={
                    "correlation_id": correlation_id,
                    "context": {
                        **base,
                        "exception_type": type(exc).__name__,
                        "response_time_ms": _elapsed_ms(started),
                    },
                },
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "context": {
                    **base,
                    "status_code": response.status_code,
                    "response_time_ms": _elapsed_ms(started),
                    "authenticated": getattr(request.state, "api_key", None)
                    is not None,
                    "rate_limit_identity": getattr(
                        request.state, "rate_limit_identity_kind", None
                    ),
                },
            },
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
