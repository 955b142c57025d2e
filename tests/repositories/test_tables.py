"""Tests for table creation and sample data seeding."""

import pytest

from movies_api.repositories.movie_repository import MovieRepository
from movies_api.repositories.tables import (
    SAMPLE_MOVIES,
    ensure_tables,
    seed_sample_movies,
)


@pytest.mark.asyncio
async def test_ensure_tables_is_idempotent(dynamodb_session) -> None:
    await ensure_tables(dynamodb_session)
    await ensure_tables(dynamodb_session)


@pytest.mark.asyncio
async def test_seed_fills_empty_catalog_once(dynamodb_session) -> None:
    repository = MovieRepository(dynamodb_session)

    assert await seed_sample_movies(repository) == len(SAMPLE_MOVIES)
    assert await seed_sample_movies(repository) == 0

    movies = await repository.list_movies(limit=200)
    assert len(movies) == len(SAMPLE_MOVIES)
    assert movies[0].title == "The Godfather"
    inception = await repository.get_by_id("mv_inception")
    assert inception.genres == ["Action", "Sci-Fi"]


@pytest.mark.asyncio
async def test_seed_skips_non_empty_catalog(dynamodb_session) -> None:
    repository = MovieRepository(dynamodb_session)
    await repository.put_item(
        {"id": "mv_own", "title": "Own", "year": 2000, "createdAt": "x"}
    )

    assert await seed_sample_movies(repository) == 0
    assert len(await repository.list_movies()) == 1
