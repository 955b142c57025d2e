"""Shared pytest fixtures."""

import uuid
from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock

import aioboto3
import pytest
from httpx import ASGITransport, AsyncClient
from moto.server import ThreadedMotoServer

from movies_api.config import settings
from movies_api.dependencies import get_api_key_repository, get_movie_service
from movies_api.main import app
from movies_api.repositories.tables import ensure_tables

VALID_API_KEY = "kapi_c2VjcmV0LXRlc3Qta2V5LTAx"


@pytest.fixture(autouse=True)
def reset_app_state() -> Generator[None, None, None]:
    """Start every test with empty rate limit counters and no overrides."""
    app.state.rate_limiter.clear_all()
    yield
    app.dependency_overrides.clear()
    app.state.rate_limiter.clear_all()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def mock_key_repo() -> MagicMock:
    """Key store that only recognizes VALID_API_KEY."""
    repo = MagicMock()
    repo.is_valid = AsyncMock(side_effect=lambda key: key == VALID_API_KEY)
    repo.issue = AsyncMock(return_value=VALID_API_KEY)
    app.dependency_overrides[get_api_key_repository] = lambda: repo
    return repo


@pytest.fixture
def mock_movie_service() -> MagicMock:
    """MovieService double injected into the movie routes."""
    service = MagicMock()
    service.list_movies = AsyncMock(return_value=[])
    service.get = AsyncMock(return_value=None)
    service.create = AsyncMock()
    service.update = AsyncMock(return_value=None)
    service.delete = AsyncMock(return_value=False)
    app.dependency_overrides[get_movie_service] = lambda: service
    return service


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"x-api-key": VALID_API_KEY}


@pytest.fixture(scope="session")
def moto_endpoint() -> Generator[str, None, None]:
    """Run a moto DynamoDB server for the whole session."""
    server = ThreadedMotoServer(ip_address="127.0.0.1", port=0)
    server.start()
    host, port = server.get_host_and_port()
    yield f"http://{host}:{port}"
    server.stop()


@pytest.fixture
async def dynamodb_session(
    moto_endpoint: str, monkeypatch: pytest.MonkeyPatch
) -> aioboto3.Session:
    """
    Point the settings at the moto server and create fresh tables.

    Table names are unique per test, so no cleanup is needed between tests.
    Repositories must be constructed after this fixture runs.
    """
    suffix = uuid.uuid4().hex[:8]
    monkeypatch.setattr(settings, "dynamodb_endpoint_url", moto_endpoint)
    monkeypatch.setattr(settings, "aws_region", "us-east-1")
    monkeypatch.setattr(settings, "aws_access_key_id", "testing")
    monkeypatch.setattr(settings, "aws_secret_access_key", "testing")
    monkeypatch.setattr(settings, "aws_session_token", None)
    monkeypatch.setattr(settings, "dynamodb_table_api_keys", f"api-keys-{suffix}")
    monkeypatch.setattr(settings, "dynamodb_table_movies", f"movies-{suffix}")

    session = aioboto3.Session()
    await ensure_tables(session)
    return session
