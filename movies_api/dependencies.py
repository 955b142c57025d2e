"""FastAPI dependencies resolving the stores built at application startup."""

from fastapi import Request

from movies_api.repositories.api_key_repository import ApiKeyRepository
from movies_api.repositories.movie_repository import MovieRepository
from movies_api.services.movie_service import MovieService


def get_api_key_repository(request: Request) -> ApiKeyRepository:
    """Return the key store attached to the application."""
    return request.app.state.api_key_repository


def get_movie_repository(request: Request) -> MovieRepository:
    """Return the movie store attached to the application."""
    return request.app.state.movie_repository


def get_movie_service(request: Request) -> MovieService:
    """Build a MovieService over the application's movie store."""
    return MovieService(get_movie_repository(request))
