"""Script to create the DynamoDB tables (and optionally seed movies) for LocalStack or AWS."""

import argparse
import asyncio

import aioboto3

from movies_api.config import settings
from movies_api.repositories.movie_repository import MovieRepository
from movies_api.repositories.tables import ensure_tables, seed_sample_movies


async def main(seed: bool) -> None:
    """Create all required DynamoDB tables."""
    print("Creating DynamoDB tables...")
    print(f"Region: {settings.aws_region}")
    print(f"Endpoint: {settings.dynamodb_endpoint_url or 'AWS'}")
    print()

    session = aioboto3.Session()
    await ensure_tables(session)
    print(f"✓ {settings.dynamodb_table_api_keys}")
    print(f"✓ {settings.dynamodb_table_movies}")

    if seed:
        inserted = await seed_sample_movies(MovieRepository(session))
        if inserted:
            print(f"✓ Seeded {inserted} sample movies")
        else:
            print("→ Movies table already has data, skipped seeding")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--seed", action="store_true", help="Load sample movies into an empty table"
    )
    args = parser.parse_args()
    asyncio.run(main(args.seed))
