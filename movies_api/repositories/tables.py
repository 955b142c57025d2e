"""DynamoDB table definitions, creation and sample data seeding."""

from datetime import UTC, datetime
from typing import Any

import aioboto3
from botocore.exceptions import ClientError

from movies_api.config import settings
from movies_api.logging.config import get_logger
from movies_api.models.movie import Movie
from movies_api.repositories.base import get_dynamodb_config
from movies_api.repositories.movie_repository import MovieRepository

logger = get_logger(__name__)

SAMPLE_MOVIES: list[dict[str, Any]] = [
    {
        "id": "mv_inception",
        "title": "Inception",
        "year": 2010,
        "rating": 8.8,
        "genres": ["Action", "Sci-Fi"],
        "plot": "A thief enters dreams to steal secrets, then gets a chance to erase his past.",
    },
    {
        "id": "mv_interstellar",
        "title": "Interstellar",
        "year": 2014,
        "rating": 8.7,
        "genres": ["Adventure", "Sci-Fi"],
        "plot": "A team travels through a wormhole searching for a new home for humanity.",
    },
    {
        "id": "mv_darkknight",
        "title": "The Dark Knight",
        "year": 2008,
        "rating": 9.0,
        "genres": ["Action", "Crime"],
        "plot": "Batman faces the Joker, who pushes Gotham into chaos.",
    },
    {
        "id": "mv_spiritedaway",
        "title": "Spirited Away",
        "year": 2001,
        "rating": 8.6,
        "genres": ["Animation", "Fantasy"],
        "plot": "A girl enters a spirit world to save her parents.",
    },
    {
        "id": "mv_parasite",
        "title": "Parasite",
        "year": 2019,
        "rating": 8.5,
        "genres": ["Drama", "Thriller"],
        "plot": "A poor family schemes to infiltrate a wealthy household.",
    },
    {
        "id": "mv_whiplash",
        "title": "Whiplash",
        "year": 2014,
        "rating": 8.5,
        "genres": ["Drama", "Music"],
        "plot": "A young drummer clashes with a ruthless teacher to reach greatness.",
    },
    {
        "id": "mv_matrix",
        "title": "The Matrix",
        "year": 1999,
        "rating": 8.7,
        "genres": ["Action", "Sci-Fi"],
        "plot": "A hacker discovers reality is a simulation and fights to free humanity.",
    },
    {
        "id": "mv_godfather",
        "title": "The Godfather",
        "year": 1972,
        "rating": 9.2,
        "genres": ["Crime", "Drama"],
        "plot": "A mafia patriarch transfers control to his reluctant son.",
    },
]


async def _create_table(
    dynamodb: Any, table_name: str, partition_key: str
) -> bool:
    """
    Create a table keyed by a single string partition key.

    Args:
        dynamodb: DynamoDB resource
        table_name: Name of the table
        partition_key: Attribute name of the partition key

    Returns:
        True if the table was created, False if it already existed
    """
    try:
        table = await dynamodb.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": partition_key, "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": partition_key, "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        await table.wait_until_exists()
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            return False
        raise
    logger.info("Created table", extra={"context": {"table": table_name}})
    return True


async def ensure_tables(session: aioboto3.Session) -> None:
    """Create the api keys and movies tables if they do not exist."""
    async with session.resource("dynamodb", **get_dynamodb_config()) as dynamodb:
        await _create_table(dynamodb, settings.dynamodb_table_api_keys, "apiKey")
        await _create_table(dynamodb, settings.dynamodb_table_movies, "id")


async def seed_sample_movies(repository: MovieRepository) -> int:
    """
    Load the sample catalog into an empty movies table.

    Args:
        repository: Movie repository to write through

    Returns:
        Number of movies inserted (0 when the table already had data)
    """
    if not await repository.is_empty():
        return 0

    now = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    for data in SAMPLE_MOVIES:
        await repository.create(Movie(created_at=now, **data))

    logger.info(
        "Seeded sample movies",
        extra={"context": {"count": len(SAMPLE_MOVIES)}},
    )
    return len(SAMPLE_MOVIES)
