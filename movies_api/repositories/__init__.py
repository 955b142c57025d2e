"""Repository layer for DynamoDB operations."""

from movies_api.repositories.api_key_repository import ApiKeyRepository
from movies_api.repositories.movie_repository import MovieRepository

__all__ = ["MovieRepository", "ApiKeyRepository"]
