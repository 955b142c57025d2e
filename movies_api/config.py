"""Configuration management using Pydantic Settings."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Lambda gets its configuration from the function environment
        env_file=".env" if os.getenv("AWS_EXECUTION_ENV") is None else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AWS Configuration
    aws_region: str = "us-east-2"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None

    @field_validator(
        "aws_access_key_id",
        "aws_secret_access_key",
        "aws_session_token",
        "dynamodb_endpoint_url",
        mode="before",
    )
    @classmethod
    def convert_empty_string_to_none(cls, v):
        """Treat blank values as unset so boto3 falls back to its default chain."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    # DynamoDB Configuration
    dynamodb_endpoint_url: str | None = None
    dynamodb_table_api_keys: str = "movies-api-keys"
    dynamodb_table_movies: str = "movies-catalog"
    auto_create_tables: bool = True
    seed_sample_movies: bool = True

    # Application Configuration
    log_level: str = "INFO"
    api_title: str = "Movies Open API"
    api_version: str = "1.0.0"
    service_name: str = "Movies Open API (DynamoDB)"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Request / listing limits
    max_request_size_bytes: int = 1024 * 1024  # 1MB
    default_list_limit: int = 50
    max_list_limit: int = 200

    # Rate Limiting (applies to every /v1 route)
    rate_limit_per_minute: int = 60
    rate_limit_window_seconds: int = 60
    rate_limit_max_tracked_identities: int = 10_000


# Global settings instance
settings = Settings()
