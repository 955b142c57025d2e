"""API Key repository (the key store) for DynamoDB operations."""

from datetime import UTC, datetime
from typing import Optional

import aioboto3
from botocore.exceptions import ClientError

from movies_api.auth.api_key import generate_api_key
from movies_api.config import settings
from movies_api.logging.config import get_logger
from movies_api.models.api_key import ApiKey
from movies_api.repositories.base import BaseRepository

logger = get_logger(__name__)

# A collision of 144-bit tokens is not expected; the bound keeps issue() finite
_MAX_ISSUE_ATTEMPTS = 3


class ApiKeyRepository(BaseRepository):
    """
    Persists issued API keys and answers whether a key exists.

    Keys are stored under their own value as partition key, so validation
    is a single exact-match GetItem.
    """

    def __init__(self, session: aioboto3.Session | None = None) -> None:
        """Initialize ApiKeyRepository with the api keys table."""
        super().__init__(settings.dynamodb_table_api_keys, session)

    async def issue(self, name: str, email: str) -> str:
        """
        Generate, persist and return a new API key.

        Args:
            name: Key holder name
            email: Key holder contact email

        Returns:
            The new plaintext API key

        Raises:
            ClientError: If the write fails for any reason other than a
                key collision
        """
        for _ in range(_MAX_ISSUE_ATTEMPTS):
            record = ApiKey(
                api_key=generate_api_key(),
                name=name,
                email=email,
                created_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            )
            try:
                await self.put_item(
                    record.model_dump(by_alias=True),
                    condition_expression="attribute_not_exists(apiKey)",
                )
            except ClientError as e:
                if e.response["Error"]["Code"] != "ConditionalCheckFailedException":
                    raise
                logger.warning("Generated API key collided, regenerating")
                continue
            return record.api_key

        raise RuntimeError("Could not generate a unique API key")

    async def is_valid(self, api_key: str) -> bool:
        """
        Check whether exactly this key was issued.

        Args:
            api_key: Candidate key, already trimmed by the caller

        Returns:
            True iff a record with this exact token exists
        """
        if not api_key:
            return False
        item = await self.get_item({"apiKey": api_key})
        return item is not None

    async def get(self, api_key: str) -> Optional[ApiKey]:
        """
        Get the full record for a key.

        Args:
            api_key: API key token

        Returns:
            ApiKey if found, None otherwise
        """
        if not api_key:
            return None
        item = await self.get_item({"apiKey": api_key})
        if item:
            return ApiKey(**item)
        return None

    async def list_all(self) -> list[ApiKey]:
        """Return every issued key, oldest first."""
        items = await self.scan_all()
        keys = [ApiKey(**item) for item in items]
        return sorted(keys, key=lambda key: key.created_at)
