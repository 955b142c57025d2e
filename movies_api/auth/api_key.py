"""API key generation and credential extraction utilities."""

import secrets

from starlette.requests import Request

API_KEY_HEADER = "x-api-key"
API_KEY_PREFIX = "kapi_"

# 18 random bytes -> 24 URL-safe characters
_TOKEN_BYTES = 18


def generate_api_key() -> str:
    """
    Generate a new opaque API key.

    Returns:
        "kapi_" followed by 24 URL-safe characters from a CSPRNG
    """
    return f"{API_KEY_PREFIX}{secrets.token_urlsafe(_TOKEN_BYTES)}"


def normalize_api_key(raw: str | None) -> str | None:
    """
    Trim a raw header value.

    Args:
        raw: Header value as received (may be None)

    Returns:
        The trimmed key, or None when absent or blank
    """
    if raw is None:
        return None
    key = raw.strip()
    return key or None


def get_api_key_from_request(request: Request) -> str | None:
    """Return the trimmed x-api-key header of a request, if any."""
    return normalize_api_key(request.headers.get(API_KEY_HEADER))
