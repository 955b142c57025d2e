"""Data models for the Movies Open API."""

from movies_api.models.api_key import ApiKey
from movies_api.models.movie import Movie

__all__ = ["Movie", "ApiKey"]
