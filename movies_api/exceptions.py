"""Custom exception classes for the Movies Open API."""

from typing import Any


class MoviesAPIError(Exception):
    """Base exception for the Movies Open API."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class UnauthorizedError(MoviesAPIError):
    """Raised when no credential was supplied (401)."""

    def __init__(
        self,
        message: str = "API key required",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize UnauthorizedError.

        Args:
            message: Error message
            details: Additional error details (usually a remediation hint)
        """
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHORIZED",
            details=details,
        )


class ForbiddenError(MoviesAPIError):
    """Raised when a credential was supplied but is not recognized (403)."""

    def __init__(
        self,
        message: str = "Invalid API key",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN",
            details=details,
        )


class RateLimitError(MoviesAPIError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = 60,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize RateLimitError.

        Args:
            message: Error message
            retry_after: Seconds until retry is allowed
            details: Additional error details
        """
        error_details = details or {}
        error_details["retry_after"] = retry_after
        super().__init__(
            message=message,
            status_code=429,
            error_code="RATE_LIMIT_EXCEEDED",
            details=error_details,
        )
        self.retry_after = retry_after


class MovieNotFoundError(MoviesAPIError):
    """Raised when a movie is not found (404)."""

    def __init__(
        self,
        message: str = "Movie not found",
        movie_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        error_details = details or {}
        if movie_id:
            error_details["movie_id"] = movie_id
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=error_details,
        )


class RequestTooLargeError(MoviesAPIError):
    """Raised when request payload exceeds size limit (413)."""

    def __init__(
        self,
        message: str = "Request payload too large",
        max_size: str = "1024KB",
        details: dict[str, Any] | None = None,
    ) -> None:
        error_details = details or {}
        error_details["max_size"] = max_size
        super().__init__(
            message=message,
            status_code=413,
            error_code="PAYLOAD_TOO_LARGE",
            details=error_details,
        )
