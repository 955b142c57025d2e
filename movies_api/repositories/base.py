"""Base repository class with common DynamoDB operations."""

from typing import Any

import aioboto3

from movies_api.config import settings
from movies_api.logging.config import get_logger

logger = get_logger(__name__)


def get_dynamodb_config() -> dict[str, Any]:
    """
    Build DynamoDB resource configuration based on environment.

    With IAM roles (Lambda, ECS) only the region is passed. For LocalStack,
    DynamoDB Local or a moto server, the endpoint URL and explicit
    credentials are added.

    Returns:
        Dictionary of aioboto3 resource parameters
    """
    config: dict[str, Any] = {"region_name": settings.aws_region}

    if settings.dynamodb_endpoint_url:
        config["endpoint_url"] = settings.dynamodb_endpoint_url

    # Temporary credentials need all three values
    if settings.aws_access_key_id:
        config["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        config["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_session_token:
        config["aws_session_token"] = settings.aws_session_token

    if "aws_access_key_id" not in config:
        logger.debug("DynamoDB config: using default credential chain")

    return config


class BaseRepository:
    """
    Base repository providing common DynamoDB operations.

    The aioboto3 session is created once at application startup and shared
    by every repository; each operation opens a short-lived resource.
    """

    def __init__(
        self, table_name: str, session: aioboto3.Session | None = None
    ) -> None:
        """
        Initialize repository.

        Args:
            table_name: Name of the DynamoDB table
            session: Shared aioboto3 session (a new one when omitted)
        """
        self.table_name = table_name
        self.session = session or aioboto3.Session()

    def resource(self):
        """Open a DynamoDB resource context for this repository's session."""
        return self.session.resource("dynamodb", **get_dynamodb_config())

    async def put_item(
        self, item: dict[str, Any], condition_expression: str | None = None
    ) -> None:
        """
        Put item into DynamoDB table.

        Args:
            item: Dictionary representing the item to store
            condition_expression: Optional condition the write must satisfy

        Raises:
            ClientError: ConditionalCheckFailedException when the condition fails
        """
        params: dict[str, Any] = {"Item": item}
        if condition_expression:
            params["ConditionExpression"] = condition_expression

        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.put_item(**params)

    async def get_item(self, key: dict[str, Any]) -> dict[str, Any] | None:
        """
        Get item from DynamoDB table by key.

        Args:
            key: Dictionary with the partition key

        Returns:
            Item dictionary or None if not found
        """
        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.get_item(Key=key, ConsistentRead=True)
            return response.get("Item")

    async def delete_item(self, key: dict[str, Any]) -> dict[str, Any] | None:
        """
        Delete item from DynamoDB table.

        Args:
            key: Dictionary with the partition key

        Returns:
            The deleted item's attributes, or None if nothing was stored
        """
        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response = await table.delete_item(Key=key, ReturnValues="ALL_OLD")
            return response.get("Attributes")

    async def update_item(
        self,
        key: dict[str, Any],
        update_expression: str,
        expression_values: dict[str, Any],
        expression_names: dict[str, str] | None = None,
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """
        Update item in DynamoDB table.

        Args:
            key: Dictionary with the partition key
            update_expression: DynamoDB update expression
            expression_values: Values for the update expression
            expression_names: Optional attribute name mappings for reserved keywords
            condition_expression: Optional condition the update must satisfy

        Returns:
            Updated item attributes
        """
        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            update_params: dict[str, Any] = {
                "Key": key,
                "UpdateExpression": update_expression,
                "ExpressionAttributeValues": expression_values,
                "ReturnValues": "ALL_NEW",
            }
            if expression_names:
                update_params["ExpressionAttributeNames"] = expression_names
            if condition_expression:
                update_params["ConditionExpression"] = condition_expression

            response = await table.update_item(**update_params)
            return response.get("Attributes", {})

    async def scan_all(self, **scan_kwargs: Any) -> list[dict[str, Any]]:
        """
        Scan the whole table, following LastEvaluatedKey pagination.

        Args:
            **scan_kwargs: Extra Scan parameters (e.g. FilterExpression)

        Returns:
            Every matching item
        """
        items: list[dict[str, Any]] = []
        async with self.resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            params = dict(scan_kwargs)
            while True:
                response = await table.scan(**params)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                params["ExclusiveStartKey"] = last_key
        return items
