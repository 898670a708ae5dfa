"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from koomy.api.client import ApiClient
from koomy.config.settings import get_settings
from koomy.models.domain import Community, Membership, User

BASE_URL = "https://api.koomy.test"

Route = httpx.Response | Callable[[httpx.Request], httpx.Response]


class FakeApi:
    """Routes ``(method, path)`` to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response: Route) -> None:
        self.routes[(method.upper(), path)] = response

    def json(self, method: str, path: str, body: Any, status_code: int = 200) -> None:
        self.add(method, path, httpx.Response(status_code, json=body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if callable(route):
            return route(request)
        return route

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    """Point settings at an https test API and reset the settings cache."""
    monkeypatch.setenv("API_BASE_URL", BASE_URL)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
async def api(fake_api: FakeApi):
    """ApiClient wired to the in-memory fake API."""
    transport = httpx.MockTransport(fake_api.handler)
    async with httpx.AsyncClient(transport=transport) as http:
        yield ApiClient(BASE_URL, client=http)


@pytest.fixture()
def communities() -> list[Community]:
    return [
        Community(id="c1", name="UNSA Rail", community_type="union"),
        Community(id="c2", name="Club Nautique", community_type="club"),
    ]


@pytest.fixture()
def user() -> User:
    return User(
        id="u1",
        first_name="Camille",
        last_name="Martin",
        email="camille@example.com",
        memberships=[
            Membership(id="m1", community_id="c1", role="admin", admin_role="super_admin"),
            Membership(id="m2", community_id="c2", role="member", status="expired"),
        ],
    )
