"""Unit tests for SessionStore login and community loading against a fake API."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from koomy.exceptions import ApiError
from koomy.session.store import SessionStore

LOGIN_BODY = {
    "user": {
        "id": "u1",
        "firstName": "Camille",
        "lastName": "Martin",
        "email": "camille@example.com",
    },
    "memberships": [
        {"id": "m1", "communityId": "c1", "role": "admin", "status": "active"},
    ],
}

COMMUNITIES_BODY = [
    {"id": "c1", "name": "UNSA Rail", "memberCount": 1200},
    {"id": "c2", "name": "Club Nautique"},
]


@pytest.mark.unit
class TestSessionLogin:
    async def test_login_attaches_memberships(self, api, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN_BODY)
        store = SessionStore()
        user = await store.login(api, "camille@example.com", "secret", auto_select=False)
        assert user.first_name == "Camille"
        assert [m.id for m in store.user.memberships] == ["m1"]
        assert store.current_membership is None

    async def test_login_sends_credentials(self, api, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN_BODY)
        await SessionStore().login(api, "camille@example.com", "secret")
        (request,) = fake_api.calls("POST", "/api/auth/login")
        assert fake_api.body(request) == {"email": "camille@example.com", "password": "secret"}

    async def test_single_membership_auto_selected(self, api, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN_BODY)
        store = SessionStore()
        await store.login(api, "camille@example.com", "secret")
        assert store.current_membership.community_id == "c1"

    async def test_admin_login_uses_admin_endpoint(self, api, fake_api) -> None:
        fake_api.json("POST", "/api/admin/login", LOGIN_BODY)
        store = SessionStore()
        await store.login(api, "camille@example.com", "secret", admin=True)
        assert len(fake_api.calls("POST", "/api/admin/login")) == 1
        assert store.user is not None

    async def test_bad_credentials_leave_session_anonymous(self, api, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", {"error": "Invalid credentials"}, 401)
        store = SessionStore()
        with pytest.raises(ApiError, match="Invalid credentials"):
            await store.login(api, "camille@example.com", "wrong")
        assert store.user is None


@pytest.mark.unit
class TestLoadCommunities:
    async def test_anonymous_makes_no_request(self, api, fake_api) -> None:
        fake_api.json("GET", "/api/communities", COMMUNITIES_BODY)
        store = SessionStore()
        result = await store.load_communities(api)
        assert result == ()
        assert fake_api.requests == []

    async def test_loads_and_reconciles_selection(self, api, fake_api, user) -> None:
        fake_api.json("GET", "/api/communities", COMMUNITIES_BODY)
        store = SessionStore()
        store.set_user(user)
        store.select_community("c1")
        assert store.current_community is None

        await store.load_communities(api)
        assert store.current_community.name == "UNSA Rail"
        assert store.current_community.member_count == 1200

    async def test_failure_keeps_state(self, api, fake_api, user) -> None:
        fake_api.json("GET", "/api/communities", {"error": "boom"}, 500)
        store = SessionStore()
        store.set_user(user)
        result = await store.load_communities(api)
        assert result == ()
        assert store.user is user

    async def test_late_response_after_logout_is_dropped(self, api, fake_api, user) -> None:
        store = SessionStore()
        store.set_user(user)
        release = asyncio.Event()

        async def slow_get_all():
            await release.wait()
            return await original()

        fake_api.json("GET", "/api/communities", COMMUNITIES_BODY)
        original = api.communities.get_all
        api.communities.get_all = slow_get_all  # type: ignore[method-assign]

        task = asyncio.create_task(store.load_communities(api))
        await asyncio.sleep(0)
        store.logout()
        release.set()
        await task

        assert store.all_communities == ()
        assert store.current_community is None

    async def test_transport_error_is_api_error(self, fake_api, user) -> None:
        from koomy.api.client import ApiClient

        def explode(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        fake_api.add("GET", "/api/communities", explode)
        transport = httpx.MockTransport(fake_api.handler)
        async with httpx.AsyncClient(transport=transport) as http:
            api = ApiClient("https://api.koomy.test", client=http)
            store = SessionStore()
            store.set_user(user)
            assert await store.load_communities(api) == ()

    async def test_unknown_enum_value_keeps_state(self, api, fake_api, user) -> None:
        fake_api.json(
            "GET",
            "/api/communities",
            [{"id": "c1", "name": "UNSA Rail", "subscriptionStatus": "trialing"}],
        )
        store = SessionStore()
        store.set_user(user)
        store.select_community("c1")
        assert await store.load_communities(api) == ()
        assert store.current_membership.id == "m1"
        assert store.current_community is None
