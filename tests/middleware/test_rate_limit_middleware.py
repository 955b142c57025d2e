"""Tests for rate limiting applied to the application."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from movies_api.middleware.rate_limit import RateLimiter, RateLimitMiddleware


@pytest.fixture
def small_app() -> FastAPI:
    """App with a limit of 2 requests per window on /v1."""
    app = FastAPI()
    app.add_middleware(
        RateLimitMiddleware, limiter=RateLimiter(limit=2), path_prefix="/v1"
    )

    @app.get("/v1/ping")
    async def ping() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/v1")
    async def v1_root() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/v10/ping")
    async def other() -> dict[str, bool]:
        return {"ok": True}

    return app


@pytest.mark.asyncio
async def test_prefix_scope(small_app: FastAPI) -> None:
    transport = ASGITransport(app=small_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        responses = [await client.get("/v1/ping") for _ in range(2)]
        blocked = await client.get("/v1")
        unrelated = [await client.get("/v10/ping") for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200]
    assert blocked.status_code == 429
    assert all(r.status_code == 200 for r in unrelated)
    assert "RateLimit" not in unrelated[0].headers


@pytest.mark.asyncio
async def test_sixty_first_request_is_rejected(client: AsyncClient) -> None:
    for i in range(60):
        response = await client.get("/v1/health")
        assert response.status_code == 200, f"request {i + 1} was limited"

    response = await client.get("/v1/health")

    assert response.status_code == 429
    data = response.json()
    assert data["status"] == "error"
    assert data["error_code"] == "RATE_LIMIT_EXCEEDED"
    assert data["details"]["limit"] == 60
    assert 0 < int(response.headers["Retry-After"]) <= 60
    assert response.headers["RateLimit-Policy"] == "60;w=60"
    assert "remaining=0" in response.headers["RateLimit"]
    assert "X-Request-ID" in response.headers
    assert data["correlation_id"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_success_responses_carry_quota_headers(client: AsyncClient) -> None:
    first = await client.get("/v1/health")
    second = await client.get("/v1/health")

    assert first.headers["RateLimit-Policy"] == "60;w=60"
    assert first.headers["RateLimit"].startswith("limit=60, remaining=59, reset=")
    assert second.headers["RateLimit"].startswith("limit=60, remaining=58, reset=")


@pytest.mark.asyncio
async def test_key_and_address_buckets_are_separate(client: AsyncClient) -> None:
    for _ in range(60):
        await client.get("/v1/health")
    assert (await client.get("/v1/health")).status_code == 429

    keyed = await client.get("/v1/health", headers={"x-api-key": "kapi_whatever"})

    assert keyed.status_code == 200
    assert "remaining=59" in keyed.headers["RateLimit"]


@pytest.mark.asyncio
async def test_unverified_keys_get_their_own_bucket(client: AsyncClient) -> None:
    for _ in range(60):
        await client.get("/v1/health", headers={"x-api-key": "kapi_one"})

    assert (
        await client.get("/v1/health", headers={"x-api-key": "kapi_one"})
    ).status_code == 429
    assert (
        await client.get("/v1/health", headers={"x-api-key": "kapi_two"})
    ).status_code == 200


@pytest.mark.asyncio
async def test_limit_applies_before_authentication(
    client: AsyncClient, mock_key_repo, mock_movie_service
) -> None:
    headers = {"x-api-key": "kapi_not_issued"}
    for _ in range(60):
        response = await client.post(
            "/v1/movies", json={"title": "X", "year": 2000}, headers=headers
        )
        assert response.status_code == 403

    response = await client.post(
        "/v1/movies", json={"title": "X", "year": 2000}, headers=headers
    )

    assert response.status_code == 429
    assert mock_key_repo.is_valid.await_count == 60


@pytest.mark.asyncio
async def test_portal_and_root_are_not_limited(
    client: AsyncClient, mock_key_repo
) -> None:
    for _ in range(65):
        response = await client.post(
            "/portal/keys", json={"name": "Ada", "email": "ada@example.com"}
        )
        assert response.status_code == 201
    assert "RateLimit" not in response.headers

    root = await client.get("/")
    assert root.status_code == 200
    assert "RateLimit" not in root.headers


@pytest.mark.asyncio
async def test_valid_key_shares_bucket_across_reads_and_writes(
    client: AsyncClient, mock_key_repo, mock_movie_service, auth_headers
) -> None:
    for _ in range(59):
        await client.get("/v1/movies", headers=auth_headers)

    last = await client.delete("/v1/movies/mv_missing", headers=auth_headers)
    limited = await client.get("/v1/movies", headers=auth_headers)

    assert last.status_code == 404
    assert "remaining=0" in last.headers["RateLimit"]
    assert limited.status_code == 429
