"""API Key model for DynamoDB."""

from pydantic import BaseModel, ConfigDict, Field


class ApiKey(BaseModel):
    """
    Issued API key record.

    Attributes:
        api_key: Opaque token; partition key of the api keys table
        name: Name of the key holder
        email: Contact email of the key holder
        created_at: ISO 8601 timestamp of issuance
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "apiKey": "kapi_Qm9vZ2llV29vZ2llQm9vZ2ll",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "createdAt": "2025-11-11T12:00:00Z",
            }
        },
    )

    api_key: str = Field(..., alias="apiKey", description="Opaque API key token")
    name: str = Field(..., description="Key holder name")
    email: str = Field(..., description="Key holder contact email")
    created_at: str = Field(
        ..., alias="createdAt", description="ISO 8601 creation timestamp"
    )
