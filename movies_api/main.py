"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aioboto3
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from movies_api.config import settings
from movies_api.exceptions import MoviesAPIError
from movies_api.handlers.exception_handler import (
    generic_exception_handler,
    http_exception_handler,
    movies_api_exception_handler,
    validation_exception_handler,
)
from movies_api.logging.config import configure_logging, get_logger
from movies_api.middleware.logging import LoggingMiddleware
from movies_api.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from movies_api.middleware.request_validation import RequestSizeValidationMiddleware
from movies_api.repositories.api_key_repository import ApiKeyRepository
from movies_api.repositories.movie_repository import MovieRepository
from movies_api.repositories.tables import ensure_tables, seed_sample_movies
from movies_api.routes import health, movies, portal

# Configure logging before creating the app
configure_logging()

logger = get_logger(__name__)

DESCRIPTION = """
## Movies Open API

A public movie catalog. Anyone can browse; writing requires an API key.

### Authentication

Issue a key with `POST /portal/keys` (name and email), then send it on
every write request:

```
x-api-key: YOUR_API_KEY
```

### Rate Limits

- Every `/v1` route: 60 requests per minute by default
- Counted per API key when the `x-api-key` header is present, otherwise per
  client address
- Responses carry `RateLimit` and `RateLimit-Policy` headers; 429 responses
  add `Retry-After`
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables and seed the sample catalog when enabled."""
    if settings.auto_create_tables:
        await ensure_tables(app.state.dynamodb_session)
        if settings.seed_sample_movies:
            await seed_sample_movies(app.state.movie_repository)
    logger.info(
        "Application started",
        extra={
            "context": {
                "rate_limit_per_minute": app.state.rate_limiter.limit,
                "movies_table": settings.dynamodb_table_movies,
            }
        },
    )
    yield


def create_app() -> FastAPI:
    """
    Build the application with its shared store handles and rate limiter.

    One aioboto3 session is created here and injected into both
    repositories; route dependencies read them from app.state.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    session = aioboto3.Session()
    app.state.dynamodb_session = session
    app.state.api_key_repository = ApiKeyRepository(session)
    app.state.movie_repository = MovieRepository(session)
    app.state.rate_limiter = RateLimiter(
        limit=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
        max_tracked=settings.rate_limit_max_tracked_identities,
    )

    # Last added = outermost: size check -> logging -> rate limit -> routes
    app.add_middleware(
        RateLimitMiddleware, limiter=app.state.rate_limiter, path_prefix="/v1"
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestSizeValidationMiddleware)

    app.add_exception_handler(MoviesAPIError, movies_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(portal.router)
    app.include_router(health.router)
    app.include_router(movies.router)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API index with links to docs, health and the key portal."""
        return {
            "message": f"Welcome to {settings.api_title}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/v1/health",
            "portal": "/portal/keys",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "Starting server",
        extra={"context": {"host": settings.api_host, "port": settings.api_port}},
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
