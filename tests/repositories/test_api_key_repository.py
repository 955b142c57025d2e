"""Tests for ApiKeyRepository against a moto DynamoDB server."""

from unittest.mock import patch

import pytest

from movies_api.auth.api_key import API_KEY_PREFIX
from movies_api.repositories.api_key_repository import ApiKeyRepository


@pytest.fixture
def repository(dynamodb_session) -> ApiKeyRepository:
    return ApiKeyRepository(dynamodb_session)


@pytest.mark.asyncio
async def test_issue_stores_holder_details(repository: ApiKeyRepository) -> None:
    api_key = await repository.issue("Ada Lovelace", "ada@example.com")

    assert api_key.startswith(API_KEY_PREFIX)
    record = await repository.get(api_key)
    assert record is not None
    assert record.api_key == api_key
    assert record.name == "Ada Lovelace"
    assert record.email == "ada@example.com"
    assert record.created_at.endswith("Z")


@pytest.mark.asyncio
async def test_issued_key_is_valid_immediately(repository: ApiKeyRepository) -> None:
    api_key = await repository.issue("Ada", "ada@example.com")
    assert await repository.is_valid(api_key) is True


@pytest.mark.asyncio
async def test_validation_is_exact_match(repository: ApiKeyRepository) -> None:
    api_key = await repository.issue("Ada", "ada@example.com")

    assert await repository.is_valid("kapi_never_issued_000000000") is False
    assert await repository.is_valid(api_key.upper()) is False
    assert await repository.is_valid(api_key[:-1]) is False
    assert await repository.is_valid(api_key + "x") is False
    assert await repository.is_valid("") is False


@pytest.mark.asyncio
async def test_each_issue_returns_a_new_key(repository: ApiKeyRepository) -> None:
    first = await repository.issue("Ada", "ada@example.com")
    second = await repository.issue("Ada", "ada@example.com")

    assert first != second
    assert await repository.is_valid(first)
    assert await repository.is_valid(second)


@pytest.mark.asyncio
async def test_issue_regenerates_on_collision(repository: ApiKeyRepository) -> None:
    existing = await repository.issue("Ada", "ada@example.com")
    fresh = "kapi_fresh-key-after-collision"

    with patch(
        "movies_api.repositories.api_key_repository.generate_api_key",
        side_effect=[existing, fresh],
    ):
        api_key = await repository.issue("Grace", "grace@example.com")

    assert api_key == fresh
    original = await repository.get(existing)
    assert original.name == "Ada"


@pytest.mark.asyncio
async def test_issue_gives_up_after_repeated_collisions(
    repository: ApiKeyRepository,
) -> None:
    existing = await repository.issue("Ada", "ada@example.com")

    with patch(
        "movies_api.repositories.api_key_repository.generate_api_key",
        return_value=existing,
    ):
        with pytest.raises(RuntimeError):
            await repository.issue("Grace", "grace@example.com")


@pytest.mark.asyncio
async def test_get_unknown_key(repository: ApiKeyRepository) -> None:
    assert await repository.get("kapi_unknown") is None
    assert await repository.get("") is None


@pytest.mark.asyncio
async def test_list_all_oldest_first(repository: ApiKeyRepository) -> None:
    assert await repository.list_all() == []

    first = await repository.issue("First", "first@example.com")
    second = await repository.issue("Second", "second@example.com")

    keys = await repository.list_all()
    assert [key.api_key for key in keys] == [first, second]
