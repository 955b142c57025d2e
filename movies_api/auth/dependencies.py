"""FastAPI dependencies for API key authentication."""

from fastapi import Depends, Header, Request

from movies_api.auth.api_key import API_KEY_HEADER, normalize_api_key
from movies_api.dependencies import get_api_key_repository
from movies_api.exceptions import ForbiddenError, UnauthorizedError
from movies_api.logging.config import get_logger
from movies_api.repositories.api_key_repository import ApiKeyRepository

logger = get_logger(__name__)

OBTAIN_KEY_HINT = (
    "Create a key with POST /portal/keys, then send it as "
    f"header '{API_KEY_HEADER}: <YOUR_KEY>'"
)


async def require_api_key(
    request: Request,
    x_api_key: str | None = Header(None, alias=API_KEY_HEADER),
    repo: ApiKeyRepository = Depends(get_api_key_repository),
) -> str:
    """
    Require a valid API key on the request.

    Use as a route dependency on every mutating endpoint. Errors raised by
    the key store are not caught here; they reach the generic handler.

    Args:
        request: Current request (the key is stored on request.state)
        x_api_key: Raw x-api-key header value
        repo: Key store

    Returns:
        The validated API key

    Raises:
        UnauthorizedError: If no key was supplied (401)
        ForbiddenError: If the key was never issued (403)
    """
    api_key = normalize_api_key(x_api_key)
    if not api_key:
        raise UnauthorizedError(
            message="API key required",
            details={"hint": OBTAIN_KEY_HINT},
        )

    if not await repo.is_valid(api_key):
        logger.warning(
            "Rejected unknown API key",
            extra={
                "correlation_id": getattr(request.state, "correlation_id", None),
                "context": {"path": request.url.path},
            },
        )
        raise ForbiddenError(message="Invalid API key")

    request.state.api_key = api_key
    return api_key
