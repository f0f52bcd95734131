"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from calog.config import settings
from calog.main import app
from calog.metabolic.models import ProfileSnapshot
from calog.session.client import SessionClient

BASE_URL = "http://calog.test"


# ---------------------------------------------------------------------------
# Fake backend (no real server needed)
# ---------------------------------------------------------------------------

class FakeBackend:
    """Routes requests to canned responses and records what was sent.

    `routes` maps "METHOD /path" to a Response or to a callable taking the
    request. Async callables work too; MockTransport awaits them. Unknown
    routes answer 404 with a JSON message.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        key = f"{request.method} {request.url.path}"
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"success": False, "message": f"No route {key}"})
        if callable(route):
            return route(request)
        return route

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
async def session_client(backend):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    client = SessionClient(BASE_URL, http=http)
    yield client
    await http.aclose()


# ---------------------------------------------------------------------------
# Metrics service
# ---------------------------------------------------------------------------

@pytest.fixture()
def api_key(monkeypatch) -> str:
    """Require an API key on the metrics service for the duration of a test."""
    monkeypatch.setattr(settings, "api_key", "test-key")
    return "test-key"


@pytest.fixture()
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@pytest.fixture()
def make_snapshot() -> Callable[..., ProfileSnapshot]:
    """Factory for the reference profile: 70 kg, 175 cm, 30 y male, moderate."""

    def _make(**overrides: Any) -> ProfileSnapshot:
        defaults: dict[str, Any] = dict(
            weight_kg=70,
            height_cm=175,
            age_years=30,
            gender="male",
            activity_level="moderate",
            goal="lose",
        )
        defaults.update(overrides)
        return ProfileSnapshot(**defaults)

    return _make
