"""Fixtures wiring the application to a moto-backed DynamoDB."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from movies_api.main import app
from movies_api.repositories.api_key_repository import ApiKeyRepository
from movies_api.repositories.movie_repository import MovieRepository


@pytest.fixture
async def live_app(dynamodb_session, monkeypatch: pytest.MonkeyPatch):
    """
    Swap the application's stores for ones bound to the per-test tables.

    The stores created at import time captured the default table names.
    """
    monkeypatch.setattr(app.state, "dynamodb_session", dynamodb_session)
    monkeypatch.setattr(
        app.state, "api_key_repository", ApiKeyRepository(dynamodb_session)
    )
    monkeypatch.setattr(
        app.state, "movie_repository", MovieRepository(dynamodb_session)
    )
    return app


@pytest.fixture
async def api_client(live_app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing API endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=live_app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
async def issued_key(api_client: AsyncClient) -> str:
    """Issue a key through the portal, as a user would."""
    response = await api_client.post(
        "/portal/keys", json={"name": "Integration", "email": "it@example.com"}
    )
    assert response.status_code == 201
    return response.json()["apiKey"]
