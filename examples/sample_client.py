"""
Sample Python client for the Movies Open API.

Demonstrates common workflows:
- Issuing an API key through the portal
- Browsing and searching the catalog with pagination
- Creating, updating and deleting a movie with the key
- Respecting rate limits (RateLimit / Retry-After headers)

Requirements:
    pip install httpx python-dotenv
"""

import asyncio
import os
import sys
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv


class MoviesAPIClient:
    """
    Async client for the Movies Open API.

    Handles the x-api-key header, 429 back-off and 5xx retries.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "http://localhost:8000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            api_key: API key for write operations (optional for reads)
            base_url: Base URL of the API
            transport: Optional httpx transport (e.g. ASGITransport in tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=30.0,
            transport=transport,
        )
        # Last quota snapshot reported by the server
        self.rate_limit: Dict[str, str] = {}

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "MoviesAPIClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ValueError("An API key is required for write operations")
        return {"x-api-key": self.api_key}

    async def _request(
        self,
        method: str,
        path: str,
        max_retries: int = 3,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """
        Send a request, waiting out 429s and retrying 5xx with backoff.

        Raises:
            httpx.HTTPStatusError: On 4xx errors or when retries run out
        """
        for attempt in range(max_retries):
            response = await self.client.request(method, path, **kwargs)
            if "RateLimit" in response.headers:
                self.rate_limit = {
                    "policy": response.headers.get("RateLimit-Policy", ""),
                    "state": response.headers["RateLimit"],
                }

            if response.status_code == 429 and attempt < max_retries - 1:
                retry_after = int(response.headers.get("Retry-After", "60"))
                print(f"Rate limited. Waiting {retry_after}s...", file=sys.stderr)
                await asyncio.sleep(retry_after)
                continue

            if response.status_code >= 500 and attempt < max_retries - 1:
                wait_time = 2**attempt
                print(
                    f"Server error. Retry {attempt + 1}/{max_retries} in {wait_time}s...",
                    file=sys.stderr,
                )
                await asyncio.sleep(wait_time)
                continue

            response.raise_for_status()
            return response.json()

        raise RuntimeError("Max retries exceeded")

    async def issue_key(self, name: str, email: str) -> str:
        """Issue an API key and keep it for later write calls."""
        data = await self._request(
            "POST", "/portal/keys", json={"name": name, "email": email}
        )
        self.api_key = data["apiKey"]
        return self.api_key

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/v1/health")

    async def list_movies(
        self,
        q: Optional[str] = None,
        year: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """List one page of movies."""
        params: Dict[str, Any] = {"limit": limit, "offset": offset}
        if q:
            params["q"] = q
        if year:
            params["year"] = year
        data = await self._request("GET", "/v1/movies", params=params)
        return data["data"]

    async def iter_all_movies(
        self, q: Optional[str] = None, page_size: int = 50
    ) -> List[Dict[str, Any]]:
        """Follow offset pagination until a short page is returned."""
        movies: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = await self.list_movies(q=q, limit=page_size, offset=offset)
            movies.extend(page)
            if len(page) < page_size:
                return movies
            offset += page_size

    async def get_movie(self, movie_id: str) -> Dict[str, Any]:
        data = await self._request("GET", f"/v1/movies/{movie_id}")
        return data["data"]

    async def create_movie(self, **fields: Any) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/v1/movies", json=fields, headers=self._auth_headers()
        )
        return data["data"]

    async def update_movie(self, movie_id: str, **fields: Any) -> Dict[str, Any]:
        data = await self._request(
            "PUT",
            f"/v1/movies/{movie_id}",
            json=fields,
            headers=self._auth_headers(),
        )
        return data["data"]

    async def delete_movie(self, movie_id: str) -> bool:
        data = await self._request(
            "DELETE", f"/v1/movies/{movie_id}", headers=self._auth_headers()
        )
        return bool(data.get("ok"))


async def main() -> None:
    """
    Walk through the catalog workflow.

    Uses MOVIES_API_KEY from the environment / .env, or issues a new key.
    """
    load_dotenv()
    base_url = os.getenv("MOVIES_API_URL", "http://localhost:8000")

    async with MoviesAPIClient(
        api_key=os.getenv("MOVIES_API_KEY"), base_url=base_url
    ) as client:
        print("\n=== Health ===")
        print(await client.health())

        if not client.api_key:
            print("\n=== Issue Key ===")
            key = await client.issue_key("Sample Client", "sample@example.com")
            print(f"Issued {key[:5]}... (set MOVIES_API_KEY to reuse it)")

        print("\n=== Search 'dark' ===")
        for movie in await client.list_movies(q="dark"):
            print(f"  {movie['title']} ({movie['year']}) {movie['rating']}")

        print("\n=== Create / Update / Delete ===")
        movie = await client.create_movie(
            title="Arrival", year=2016, rating=7.9, genres=["Drama", "Sci-Fi"]
        )
        print(f"Created {movie['id']}")
        movie = await client.update_movie(movie["id"], rating=8.0)
        print(f"Updated rating to {movie['rating']}")
        await client.delete_movie(movie["id"])
        print("Deleted")

        try:
            await client.get_movie(movie["id"])
        except httpx.HTTPStatusError as e:
            print(f"Not found after delete (expected): {e.response.status_code}")

        print(f"\nQuota: {client.rate_limit}")


if __name__ == "__main__":
    asyncio.run(main())
