"""Movie service layer with business logic for catalog operations."""

import secrets
from datetime import UTC, datetime

from movies_api.config import settings
from movies_api.logging.config import get_logger
from movies_api.models.movie import Movie
from movies_api.repositories.movie_repository import MovieRepository
from movies_api.schemas.movie import CreateMovieRequest, UpdateMovieRequest

logger = get_logger(__name__)

MOVIE_ID_PREFIX = "mv_"


def generate_movie_id() -> str:
    """Return "mv_" followed by 12 URL-safe random characters."""
    return f"{MOVIE_ID_PREFIX}{secrets.token_urlsafe(9)}"


class MovieService:
    """
    Service layer for movie operations.

    Generates identifiers and timestamps, applies listing defaults and
    delegates persistence to MovieRepository.
    """

    def __init__(self, repository: MovieRepository | None = None) -> None:
        """
        Initialize MovieService.

        Args:
            repository: MovieRepository instance (creates new if None)
        """
        self.repository = repository or MovieRepository()

    async def list_movies(
        self,
        q: str | None = None,
        year: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Movie]:
        """
        List movies with optional filters.

        Args:
            q: Case-insensitive title/plot substring (blank means no filter)
            year: Exact release year
            limit: Page size (defaults to DEFAULT_LIST_LIMIT, clamped to MAX_LIST_LIMIT)
            offset: Number of results to skip

        Returns:
            Movies ordered by rating desc, year desc, title asc
        """
        if limit is None:
            limit = settings.default_list_limit
        limit = min(max(1, limit), settings.max_list_limit)
        offset = max(0, offset)
        q = q.strip() if q else None

        return await self.repository.list_movies(
            q=q or None, year=year, limit=limit, offset=offset
        )

    async def get(self, movie_id: str) -> Movie | None:
        """Get a movie by ID, None if not found."""
        return await self.repository.get_by_id(movie_id)

    async def create(self, request: CreateMovieRequest) -> Movie:
        """
        Create a movie with a server-generated id.

        Args:
            request: Validated create request

        Returns:
            The stored Movie
        """
        movie = Movie(
            id=generate_movie_id(),
            title=request.title,
            year=request.year,
            rating=request.rating,
            genres=request.genres,
            plot=request.plot,
            created_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        )
        await self.repository.create(movie)

        logger.info("Movie created", extra={"context": {"movie_id": movie.id}})
        return movie

    async def update(
        self, movie_id: str, request: UpdateMovieRequest
    ) -> Movie | None:
        """
        Apply a partial update.

        Args:
            movie_id: Movie ID
            request: Fields to overwrite

        Returns:
            The merged Movie, None if not found
        """
        updated = await self.repository.update(movie_id, request.changes())
        if updated:
            logger.info(
                "Movie updated",
                extra={
                    "context": {
                        "movie_id": movie_id,
                        "fields": sorted(request.changes()),
                    }
                },
            )
        return updated

    async def delete(self, movie_id: str) -> bool:
        """
        Delete a movie.

        Returns:
            True if deleted, False if not found
        """
        deleted = await self.repository.delete(movie_id)
        if deleted:
            logger.info("Movie deleted", extra={"context": {"movie_id": movie_id}})
        return deleted
