"""
Conversions between API values and their persisted DynamoDB form.

Genres are stored as JSON text. Older or hand-loaded records may hold a
native list, a malformed string or nothing at all, so every read goes
through decode_genres.
"""

import json
from decimal import Decimal
from typing import Any, List


def encode_genres(genres: Any) -> str:
    """
    Serialize a genre list for storage.

    Args:
        genres: Genre labels; anything that is not a list stores as []

    Returns:
        JSON array text
    """
    if not isinstance(genres, list):
        genres = []
    return json.dumps([str(genre) for genre in genres])


def decode_genres(raw: Any) -> List[str]:
    """
    Normalize a persisted genre value to a list of strings.

    Args:
        raw: Stored value (JSON text, list, or anything else)

    Returns:
        List of genre labels; [] when the value cannot be decoded
    """
    if isinstance(raw, list):
        return [str(genre) for genre in raw]

    if isinstance(raw, str):
        try:
            parsed = json.loads(raw or "[]")
        except ValueError:
            return []
        if isinstance(parsed, list):
            return [str(genre) for genre in parsed]

    return []


def to_dynamodb_number(value: Any) -> Decimal:
    """Convert an int/float/str to Decimal (boto3 rejects float)."""
    return Decimal(str(value))


def from_dynamodb_number(value: Any, as_int: bool = False) -> int | float:
    """Convert a Decimal read from DynamoDB back to a Python number."""
    if value is None:
        return 0 if as_int else 0.0
    if as_int:
        return int(value)
    return float(value)
