"""Rate limiting with an in-memory fixed-window counter."""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Dict, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from movies_api.auth.api_key import get_api_key_from_request
from movies_api.exceptions import RateLimitError
from movies_api.handlers.exception_handler import (
    generic_exception_handler,
    movies_api_exception_handler,
)
from movies_api.logging.config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitState:
    """Quota snapshot for one identity after a counted request."""

    limit: int
    remaining: int
    reset_after: int
    window_seconds: int


def rate_limit_headers(
    limit: int, remaining: int, reset_after: int, window_seconds: int
) -> dict[str, str]:
    """Build IETF draft-7 RateLimit / RateLimit-Policy headers."""
    return {
        "RateLimit-Policy": f"{limit};w={window_seconds}",
        "RateLimit": f"limit={limit}, remaining={remaining}, reset={reset_after}",
    }


def identity_for_request(request: Request) -> str:
    """
    Derive the rate limit bucket for a request.

    A non-blank x-api-key header wins ("key:<key>"), whether or not the key
    is valid; otherwise the caller's address is used ("ip:<host>").
    """
    api_key = get_api_key_from_request(request)
    if api_key:
        return f"key:{api_key}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


class RateLimiter:
    """
    In-memory fixed-window rate limiter.

    Tracks request counts per identity per window. Not shared between
    processes and reset on restart.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: int = 60,
        max_tracked: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            limit: Maximum requests per identity per window
            window_seconds: Window length
            max_tracked: Identity count above which expired windows are pruned
            clock: Monotonic time source
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self._clock = clock
        # identity -> (request_count, window_start)
        self._requests: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def _reset_after(self, now: float, window_start: float) -> int:
        remaining = self.window_seconds - (now - window_start)
        return max(1, math.ceil(remaining))

    def _prune(self, now: float) -> None:
        expired = [
            identity
            for identity, (_, start) in self._requests.items()
            if now - start >= self.window_seconds
        ]
        for identity in expired:
            del self._requests[identity]

    def hit(self, identity: str) -> RateLimitState:
        """
        Count one request for an identity.

        Args:
            identity: Bucket key from identity_for_request

        Returns:
            Quota state after counting the request

        Raises:
            RateLimitError: If the identity has used its quota in this window
        """
        with self._lock:
            now = self._clock()
            count, window_start = self._requests.get(identity, (0, now))

            if now - window_start >= self.window_seconds:
                count, window_start = 0, now

            reset_after = self._reset_after(now, window_start)

            if count >= self.limit:
                raise RateLimitError(
                    message=f"Rate limit exceeded: {self.limit} requests per {self.window_seconds}s",
                    retry_after=reset_after,
                    details={
                        "limit": self.limit,
                        "window_seconds": self.window_seconds,
                    },
                )

            if identity not in self._requests and len(self._requests) >= self.max_tracked:
                self._prune(now)

            count += 1
            self._requests[identity] = (count, window_start)

        return RateLimitState(
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after=reset_after,
            window_seconds=self.window_seconds,
        )

    def reset_key(self, identity: str) -> None:
        """
        Reset the counter for one identity.

        Args:
            identity: Bucket key to reset
        """
        with self._lock:
            self._requests.pop(identity, None)

    def clear_all(self) -> None:
        """Clear all counters."""
        with self._lock:
            self._requests.clear()

    def tracked_identities(self) -> int:
        """Number of identities currently holding a window."""
        return len(self._requests)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Apply a RateLimiter to every request under a path prefix.

    Runs before routing, so rejected requests never reach authentication
    or handlers. Every response in scope carries the quota headers.
    """

    def __init__(self, app, limiter: RateLimiter, path_prefix: str = "/v1") -> None:
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix.rstrip("/")

    def _in_scope(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self._in_scope(request.url.path):
            return await call_next(request)

        identity = identity_for_request(request)
        request.state.rate_limit_identity_kind = identity.split(":", 1)[0]

        try:
            state = self.limiter.hit(identity)
        except RateLimitError as exc:
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "context": {
                        "identity_kind": request.state.rate_limit_identity_kind,
                        "path": request.url.path,
                        "retry_after": exc.retry_after,
                    },
                },
            )
            response = await movies_api_exception_handler(request, exc)
            response.headers.update(
                rate_limit_headers(
                    self.limiter.limit,
                    0,
                    exc.retry_after,
                    self.limiter.window_seconds,
                )
            )
            return response

        try:
            response = await call_next(request)
        except Exception as exc:
            # Rendered here so the 500 still carries the quota headers
            response = await generic_exception_handler(request, exc)

        response.headers.update(
            rate_limit_headers(
                state.limit, state.remaining, state.reset_after, state.window_seconds
            )
        )
        return response
