"""API routes for movie operations."""

from fastapi import APIRouter, Depends, Query, status

from movies_api.auth.dependencies import require_api_key
from movies_api.config import settings
from movies_api.dependencies import get_movie_service
from movies_api.exceptions import MovieNotFoundError
from movies_api.schemas.movie import (
    CreateMovieRequest,
    DeleteMovieResponse,
    MovieListResponse,
    MovieResponse,
    UpdateMovieRequest,
)
from movies_api.services.movie_service import MovieService

router = APIRouter(prefix="/v1/movies", tags=["Movies"])

_ERROR_EXAMPLE = {
    "status": "error",
    "error_code": "UNAUTHORIZED",
    "message": "API key required",
    "details": {"hint": "Create a key with POST /portal/keys"},
}

PROTECTED_RESPONSES = {
    401: {
        "description": "No API key supplied",
        "content": {"application/json": {"example": _ERROR_EXAMPLE}},
    },
    403: {"description": "API key not recognized"},
    429: {"description": "Rate limit exceeded"},
}


@router.get(
    "",
    response_model=MovieListResponse,
    responses={429: {"description": "Rate limit exceeded"}},
)
async def list_movies(
    q: str | None = Query(
        default=None, description="Case-insensitive search in title and plot"
    ),
    year: int | None = Query(default=None, description="Exact release year"),
    limit: int = Query(
        default=settings.default_list_limit,
        ge=1,
        le=settings.max_list_limit,
        description=f"Page size (1-{settings.max_list_limit})",
    ),
    offset: int = Query(default=0, ge=0, description="Results to skip"),
    service: MovieService = Depends(get_movie_service),
) -> MovieListResponse:
    """
    List movies, best rated first (then newest, then by title).

    Args:
        q: Optional search text
        year: Optional exact year filter
        limit: Maximum movies to return
        offset: Pagination offset
        service: Movie service (injected)

    Returns:
        MovieListResponse with one page of movies
    """
    movies = await service.list_movies(q=q, year=year, limit=limit, offset=offset)
    return MovieListResponse(data=movies)


@router.get(
    "/{movie_id}",
    response_model=MovieResponse,
    responses={404: {"description": "Movie not found"}},
)
async def get_movie(
    movie_id: str,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    """
    Retrieve a movie by ID.

    Raises:
        MovieNotFoundError: If the movie does not exist (404)
    """
    movie = await service.get(movie_id)
    if movie is None:
        raise MovieNotFoundError(
            message=f"Movie {movie_id} not found", movie_id=movie_id
        )
    return MovieResponse(data=movie)


@router.post(
    "",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "title or year missing"}, **PROTECTED_RESPONSES},
    dependencies=[Depends(require_api_key)],
)
async def create_movie(
    body: CreateMovieRequest,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    """
    Add a movie to the catalog. Requires an API key.

    Args:
        body: Movie fields (title and year required)
        service: Movie service (injected)

    Returns:
        MovieResponse with the stored movie, including its new id
    """
    movie = await service.create(body)
    return MovieResponse(data=movie)


@router.put(
    "/{movie_id}",
    response_model=MovieResponse,
    responses={404: {"description": "Movie not found"}, **PROTECTED_RESPONSES},
    dependencies=[Depends(require_api_key)],
)
async def update_movie(
    movie_id: str,
    body: UpdateMovieRequest,
    service: MovieService = Depends(get_movie_service),
) -> MovieResponse:
    """
    Partially update a movie. Requires an API key.

    Only fields present in the body change.

    Raises:
        MovieNotFoundError: If the movie does not exist (404)
    """
    movie = await service.update(movie_id, body)
    if movie is None:
        raise MovieNotFoundError(
            message=f"Movie {movie_id} not found", movie_id=movie_id
        )
    return MovieResponse(data=movie)


@router.delete(
    "/{movie_id}",
    response_model=DeleteMovieResponse,
    responses={404: {"description": "Movie not found"}, **PROTECTED_RESPONSES},
    dependencies=[Depends(require_api_key)],
)
async def delete_movie(
    movie_id: str,
    service: MovieService = Depends(get_movie_service),
) -> DeleteMovieResponse:
    """
    Delete a movie. Requires an API key.

    Raises:
        MovieNotFoundError: If the movie does not exist (404)
    """
    if not await service.delete(movie_id):
        raise MovieNotFoundError(
            message=f"Movie {movie_id} not found", movie_id=movie_id
        )
    return DeleteMovieResponse(ok=True)
