"""Middleware components for request processing."""

from movies_api.middleware.logging import LoggingMiddleware
from movies_api.middleware.rate_limit import (
    RateLimiter,
    RateLimitMiddleware,
    identity_for_request,
)
from movies_api.middleware.request_validation import RequestSizeValidationMiddleware

__all__ = [
    "LoggingMiddleware",
    "RateLimiter",
    "RateLimitMiddleware",
    "RequestSizeValidationMiddleware",
    "identity_for_request",
]
