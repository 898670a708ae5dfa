"""End-to-end wiring of KoomyApp against the in-memory fake API."""

from __future__ import annotations

import httpx
import pytest

from koomy.api.client import ApiClient
from koomy.app import KoomyApp, create_app
from koomy.session.store import SessionState
from koomy.tenant.resolver import FAVICON_APP_PRO, FAVICON_KOOMY, MANIFEST_PRO, Location
from koomy.tenant.white_label import CSS_BRAND_COLOR, CSS_BRAND_H
from koomy.theming.document import Document
from koomy.types import UploadKind

BASE_URL = "https://api.koomy.test"

LOGIN = {
    "user": {"id": "u1", "firstName": "Camille", "lastName": "Martin", "email": "c@m.fr"},
    "memberships": [{"id": "m1", "communityId": "c1", "role": "admin"}],
}
COMMUNITIES = [{"id": "c1", "name": "UNSA Rail"}, {"id": "c2", "name": "Club Nautique"}]
WHITE_LABEL = {
    "whiteLabel": True,
    "communityId": "c1",
    "communityName": "UNSA Rail",
    "brandConfig": {"appName": "UNSA Connect", "brandColor": "#E30613"},
}


@pytest.fixture()
def head() -> Document:
    return Document.with_links(
        icon="/favicon.png", apple_touch_icon="/apple.png", manifest="/manifest.json"
    )


@pytest.fixture()
async def koomy(fake_api, head):
    transport = httpx.MockTransport(fake_api.handler)
    async with httpx.AsyncClient(transport=transport) as http:
        yield create_app(
            window_location=Location(hostname="unsa.koomy.app", path="/app/login"),
            document=head,
            api=ApiClient(BASE_URL, client=http),
        )


@pytest.mark.integration
class TestAppStartup:
    async def test_create_app_defaults(self) -> None:
        app = create_app()
        assert isinstance(app, KoomyApp)
        assert app.white_label is not None
        assert app.session.snapshot().state == SessionState.ANONYMOUS
        await app.close()

    async def test_start_applies_assets_and_branding(self, koomy, fake_api, head) -> None:
        fake_api.json("GET", "/api/white-label/config", WHITE_LABEL)
        assets = await koomy.start()
        assert assets.favicon == FAVICON_KOOMY
        assert head.query_link("icon").href == FAVICON_KOOMY
        assert koomy.white_label.app_name == "UNSA Connect"
        assert head.get_style_property(CSS_BRAND_COLOR) == "#E30613"
        assert head.get_style_property(CSS_BRAND_H) is not None

    async def test_start_survives_branding_failure(self, koomy, fake_api, head) -> None:
        fake_api.json("GET", "/api/white-label/config", {"error": "boom"}, 500)
        await koomy.start()
        assert koomy.white_label.is_white_label is False
        assert koomy.white_label.app_name == "Koomy"
        assert head.root_style == {}

    async def test_navigate_switches_assets(self, koomy, head) -> None:
        koomy.navigate("/admin/dashboard")
        assert head.query_link("icon").href == FAVICON_APP_PRO
        assert head.query_link("manifest").href == MANIFEST_PRO


@pytest.mark.integration
class TestAppSession:
    async def test_login_selects_single_community(self, koomy, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN)
        fake_api.json("GET", "/api/communities", COMMUNITIES)
        await koomy.login("c@m.fr", "secret")
        snapshot = koomy.session.snapshot()
        assert snapshot.state == SessionState.AUTHENTICATED_SELECTED
        assert snapshot.current_community is not None
        assert snapshot.current_community.name == "UNSA Rail"
        assert snapshot.is_admin is True

    async def test_logout_clears_session(self, koomy, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN)
        fake_api.json("GET", "/api/communities", COMMUNITIES)
        await koomy.login("c@m.fr", "secret")
        assert koomy.api.cache.get(("communities",)) is not None
        koomy.logout()
        assert koomy.session.snapshot().state == SessionState.ANONYMOUS
        assert koomy.session.all_communities == ()
        assert koomy.api.cache.get(("communities",)) is None

    async def test_uploader_uses_app_client(self, koomy) -> None:
        flow = koomy.uploader(UploadKind.LOGO)
        assert flow.is_uploading is False
        assert flow.preview is None

    async def test_login_survives_unexpected_community_payload(self, koomy, fake_api) -> None:
        fake_api.json("POST", "/api/auth/login", LOGIN)
        fake_api.json("GET", "/api/communities", [{"id": "c1", "subscriptionStatus": "trialing"}])
        await koomy.login("c@m.fr", "secret")
        snapshot = koomy.session.snapshot()
        assert snapshot.state == SessionState.AUTHENTICATED_SELECTED
        assert snapshot.current_community is None

    async def test_start_survives_unexpected_branding_payload(self, koomy, fake_api, head) -> None:
        fake_api.json("GET", "/api/white-label/config", {"whiteLabel": "maybe"})
        await koomy.start()
        assert koomy.white_label.is_white_label is False
        assert head.root_style == {}
