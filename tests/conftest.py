"""Shared pytest fixtures for storefront tests."""

import json

import httpx
import pytest
import pytest_asyncio

from storefront.services.client import ApiClient
from storefront.settings import Settings

DATA_BASE = "https://data.test/api:data"
AUTH_BASE = "https://auth.test/api:auth"


class FakeBackend:
    """
    Scripted stand-in for the remote services, served through httpx.MockTransport.

    Routes are keyed by (host, method, path without the base prefix or query).
    Each route holds a queue of replies; the last reply repeats. A reply is an
    httpx.Response, an exception instance to raise, or a callable taking the
    request.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str, str], list] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *replies, service: str = "data") -> None:
        host = "data.test" if service == "data" else "auth.test"
        self.routes[(host, method.upper(), path)] = list(replies)

    def json(self, method: str, path: str, body, status: int = 200, service: str = "data") -> None:
        self.add(method, path, httpx.Response(status, json=body), service=service)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method.upper())
            and (path is None or _relative_path(request) == path)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.url.host, request.method, _relative_path(request))
        replies = self.routes.get(key)
        if not replies:
            return httpx.Response(404, json={"message": f"no route for {key}"})

        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply


def _relative_path(request: httpx.Request) -> str:
    path = request.url.path
    for prefix in ("/api:data", "/api:auth"):
        if path.startswith(prefix):
            return path[len(prefix):] or "/"
    return path


def request_json(request: httpx.Request):
    return json.loads(request.content) if request.content else None


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def backend():
    """Scripted remote services."""
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    """Delays requested by the retry policy, in seconds."""
    return []


@pytest.fixture
def test_settings():
    return Settings(store_api_base=DATA_BASE, auth_api_base=AUTH_BASE)


@pytest_asyncio.fixture
async def client(backend, clock, sleeps, test_settings):
    """ApiClient wired to the fake backend with a recording sleep and a fake clock."""

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    api = ApiClient(
        settings=test_settings,
        http_transport=httpx.MockTransport(backend.handler),
        sleep=fake_sleep,
        clock=clock,
    )
    yield api
    await api.close()
