"""Request validation middleware."""

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from movies_api.config import settings
from movies_api.exceptions import RequestTooLargeError
from movies_api.handlers.exception_handler import create_error_response
from movies_api.middleware.logging import CORRELATION_HEADER, resolve_correlation_id


class RequestSizeValidationMiddleware(BaseHTTPMiddleware):
    """
    Reject requests whose declared body size exceeds the configured limit.

    Runs outermost so oversized bodies are refused before anything parses
    them. Returns 413 Payload Too Large.
    """

    def __init__(self, app, max_size: int | None = None) -> None:
        super().__init__(app)
        self.max_size = max_size or settings.max_request_size_bytes

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Validate request size and process request.

        Args:
            request: The incoming request
            call_next: The next middleware/handler in the chain

        Returns:
            413 error response, or the response from the handler
        """
        # Error responses from here still carry a correlation ID
        correlation_id = resolve_correlation_id(request)
        request.state.correlation_id = correlation_id

        content_length = request.headers.get("content-length")
        try:
            size = int(content_length) if content_length else 0
        except ValueError:
            # Malformed header; the server rejects or reads what actually arrives
            size = 0

        if size > self.max_size:
            size_kb = size / 1024
            max_kb = self.max_size / 1024
            exc = RequestTooLargeError(
                message=f"Request size {size_kb:.1f}KB exceeds maximum {max_kb:.0f}KB",
                max_size=f"{max_kb:.0f}KB",
                details={"request_size": f"{size_kb:.1f}KB"},
            )
            response = create_error_response(
                error_code=exc.error_code,
                message=exc.message,
                status_code=exc.status_code,
                details=exc.details,
                correlation_id=correlation_id,
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        return await call_next(request)
