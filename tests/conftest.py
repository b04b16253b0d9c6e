"""Shared fixtures for podguid tests."""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from podguid.api.client import PodigeeClient

API_KEY = "abcd1234efgh5678"

PODCASTS: list[dict[str, Any]] = [
    {"id": 1, "title": "Morning Show"},
    {"id": 2, "title": "Deep Dives"},
]

EPISODES: dict[int, list[dict[str, Any]]] = {
    1: [
        {"id": 11, "guid": "b6a2c8f0-1111-4c1e-9a55-3f1d0e7c2a01", "title": "Pilot"},
        {"id": 12, "guid": "b6a2c8f0-2222-4c1e-9a55-3f1d0e7c2a02", "title": "Second"},
    ],
    2: [
        {"id": 21, "guid": "urn:podigee:episode:21 [final]", "title": "Deep One"},
    ],
}

UNAUTHORIZED = {"code": 401, "message": "Unauthorized", "reason": "bad token"}


class FakePodigeeAPI:
    """In-memory stand-in for the Podigee API, served through httpx.MockTransport.

    Records every request so tests can count calls and inspect headers.
    """

    def __init__(
        self,
        podcasts: Any = None,
        episodes: dict[int, Any] | None = None,
        delays: dict[int, float] | None = None,
        api_key: str = API_KEY,
    ) -> None:
        self.podcasts = PODCASTS if podcasts is None else podcasts
        self.episodes = EPISODES if episodes is None else episodes
        self.delays = delays or {}
        self.api_key = api_key
        self.requests: list[httpx.Request] = []

    def paths(self) -> list[str]:
        """Paths (with query) of all requests so far."""
        return [
            request.url.raw_path.decode().removeprefix("/api/v1") for request in self.requests
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Token") != self.api_key:
            return httpx.Response(200, json=UNAUTHORIZED)

        if request.url.path.endswith("/podcasts"):
            return httpx.Response(200, json=self.podcasts)

        if request.url.path.endswith("/episodes"):
            podcast_id = int(request.url.params["podcast_id"])
            delay = self.delays.get(podcast_id)
            if delay:
                await asyncio.sleep(delay)
            return httpx.Response(200, json=self.episodes.get(podcast_id, []))

        return httpx.Response(404, json={"code": 404, "message": "Not Found"})


def make_client(handler: Callable[[httpx.Request], Any]) -> PodigeeClient:
    """Build a PodigeeClient whose HTTP traffic goes to ``handler``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PodigeeClient(http_client=http_client)


@pytest.fixture
def fake_api() -> FakePodigeeAPI:
    """Fake API with two podcasts."""
    return FakePodigeeAPI()


@pytest.fixture
def client(fake_api: FakePodigeeAPI) -> PodigeeClient:
    """Client wired to the fake API."""
    return make_client(fake_api)
