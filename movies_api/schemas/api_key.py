"""Pydantic schemas for the key issuance portal."""

from pydantic import BaseModel, ConfigDict, Field


class IssueKeyRequest(BaseModel):
    """Request to issue a new API key."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {"name": "Ada Lovelace", "email": "ada@example.com"}
        },
    )

    name: str = Field(..., min_length=1, description="Key holder name")
    email: str = Field(..., min_length=1, description="Key holder contact email")


class IssueKeyResponse(BaseModel):
    """Response carrying a freshly issued API key."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(..., alias="apiKey", description="Plaintext API key")
    note: str = Field(..., description="Storage guidance for the key")
    docs: str = Field(..., description="Path of the interactive API docs")
