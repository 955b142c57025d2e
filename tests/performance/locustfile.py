"""
Load testing scenarios for the Movies Open API.

Run with: locust -f tests/performance/locustfile.py --host http://localhost:8000

Reads dominate real traffic; writes need LOCUST_API_KEY (or a key issued
on start). Every simulated user shares one key, so expect 429s once the
combined rate passes the per-minute quota.
"""

import os
import random
from typing import Any

from locust import HttpUser, between, task

SEARCH_TERMS = ["dark", "the", "inter", "god", "matrix", "zzz"]
YEARS = [1972, 1999, 2001, 2008, 2010, 2014, 2019]


class CatalogReader(HttpUser):
    """Anonymous browser: lists, searches and opens movies."""

    wait_time = between(0.5, 2)

    def on_start(self) -> None:
        self.seen_ids: list[str] = []

    @task(6)
    def list_movies(self) -> None:
        params = {
            "limit": random.choice([10, 50, 200]),
            "offset": random.choice([0, 0, 5]),
        }
        with self.client.get(
            "/v1/movies", params=params, catch_response=True
        ) as response:
            if response.status_code == 200:
                self.seen_ids = [m["id"] for m in response.json()["data"]]
                response.success()
            elif response.status_code == 429:
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")

    @task(3)
    def search_movies(self) -> None:
        params: dict[str, Any] = {"q": random.choice(SEARCH_TERMS)}
        if random.random() < 0.3:
            params["year"] = random.choice(YEARS)
        with self.client.get(
            "/v1/movies", params=params, name="/v1/movies?q", catch_response=True
        ) as response:
            if response.status_code in (200, 429):
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")

    @task(2)
    def get_movie(self) -> None:
        if not self.seen_ids:
            return
        movie_id = random.choice(self.seen_ids)
        with self.client.get(
            f"/v1/movies/{movie_id}", name="/v1/movies/[id]", catch_response=True
        ) as response:
            # 404 is acceptable: a writer may have deleted it
            if response.status_code in (200, 404, 429):
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")

    @task(1)
    def check_health(self) -> None:
        with self.client.get("/v1/health", catch_response=True) as response:
            if response.status_code in (200, 429):
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")


class CatalogEditor(HttpUser):
    """Key holder creating, updating and deleting movies."""

    wait_time = between(1, 3)
    weight = 1

    def on_start(self) -> None:
        api_key = os.getenv("LOCUST_API_KEY")
        if not api_key:
            response = self.client.post(
                "/portal/keys",
                json={"name": "locust", "email": "locust@example.com"},
            )
            api_key = response.json()["apiKey"]
        self.headers = {"x-api-key": api_key}
        self.created_ids: list[str] = []

    @task(3)
    def create_movie(self) -> None:
        body = {
            "title": f"Load Test {random.randint(1, 1_000_000)}",
            "year": random.choice(YEARS),
            "rating": round(random.uniform(1, 10), 1),
            "genres": random.sample(["Drama", "Sci-Fi", "Comedy", "Crime"], 2),
        }
        with self.client.post(
            "/v1/movies", json=body, headers=self.headers, catch_response=True
        ) as response:
            if response.status_code == 201:
                self.created_ids.append(response.json()["data"]["id"])
                response.success()
            elif response.status_code == 429:
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")

    @task(2)
    def update_movie(self) -> None:
        if not self.created_ids:
            return
        movie_id = random.choice(self.created_ids)
        with self.client.put(
            f"/v1/movies/{movie_id}",
            json={"rating": round(random.uniform(1, 10), 1)},
            headers=self.headers,
            name="/v1/movies/[id]",
            catch_response=True,
        ) as response:
            if response.status_code in (200, 429):
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")

    @task(1)
    def delete_movie(self) -> None:
        if not self.created_ids:
            return
        movie_id = self.created_ids.pop(0)
        with self.client.delete(
            f"/v1/movies/{movie_id}",
            headers=self.headers,
            name="/v1/movies/[id]",
            catch_response=True,
        ) as response:
            if response.status_code in (200, 404, 429):
                response.success()
            else:
                response.failure(f"Unexpected status: {response.status_code}")
