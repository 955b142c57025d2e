"""Exception handlers rendering every failure in one JSON error envelope."""

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from movies_api.exceptions import MoviesAPIError, RateLimitError
from movies_api.logging.config import get_logger

logger = get_logger(__name__)

# Location prefixes FastAPI puts in front of field names
_LOCATION_PARTS = ("body", "query", "path", "header")

_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
}


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    correlation_id: str | None = None,
) -> JSONResponse:
    """
    Build the error envelope.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        correlation_id: Request correlation ID, omitted from the body when None

    Returns:
        JSONResponse of {"status": "error", error_code, message, details[, correlation_id]}
    """
    content: dict[str, Any] = {
        "status": "error",
        "error_code": error_code,
        "message": message,
        "details": details or {},
    }
    if correlation_id:
        content["correlation_id"] = correlation_id

    return JSONResponse(status_code=status_code, content=content)


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


async def movies_api_exception_handler(
    request: Request, exc: MoviesAPIError
) -> JSONResponse:
    """Render a MoviesAPIError; 429s also get a Retry-After header."""
    response = create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=_correlation_id(request),
    )
    if isinstance(exc, RateLimitError):
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


def _describe_validation_error(error: dict[str, Any]) -> dict[str, str]:
    parts = [str(loc) for loc in error["loc"] if loc not in _LOCATION_PARTS]
    field = ".".join(parts) if parts else "request"

    error_type = error["type"]
    if error_type == "missing":
        message = "Field is required"
    elif error_type == "value_error":
        message = f"Invalid value: {error['msg']}"
    else:
        message = error["msg"]

    return {"field": field, "message": message, "type": error_type}


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Turn request validation failures into a 400.

    The message names the first offending field, e.g. "title: Field is
    required (and 1 more errors)"; every failure is listed under
    details.validation_errors.
    """
    problems = [_describe_validation_error(error) for error in exc.errors()]

    if problems:
        summary = f"{problems[0]['field']}: {problems[0]['message']}"
        if len(problems) > 1:
            summary += f" (and {len(problems) - 1} more errors)"
    else:
        summary = "Invalid request data"

    return create_error_response(
        error_code="VALIDATION_ERROR",
        message=summary,
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"validation_errors": problems},
        correlation_id=_correlation_id(request),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render router errors (unmatched routes, wrong methods) in the envelope."""
    error_code, message = _HTTP_ERROR_CODES.get(
        exc.status_code, ("HTTP_ERROR", str(exc.detail))
    )
    response = create_error_response(
        error_code=error_code,
        message=message,
        status_code=exc.status_code,
        details={"path": request.url.path},
        correlation_id=_correlation_id(request),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for anything unexpected.

    The traceback goes to the log; the caller gets a 500 whose only
    diagnostic is the exception class name.
    """
    correlation_id = _correlation_id(request)
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={
            "correlation_id": correlation_id,
            "context": {
                "exception_type": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
        },
    )

    return create_error_response(
        error_code="INTERNAL_ERROR",
        message="Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        details={"diagnostic": type(exc).__name__},
        correlation_id=correlation_id,
    )
