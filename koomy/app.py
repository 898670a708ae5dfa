"""Top-level wiring: one session, one branding store, one API client per page."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from koomy.api.client import ApiClient
from koomy.api.queries import Queries
from koomy.config.logging import bind_tenant_context, clear_tenant_context, setup_logging
from koomy.config.settings import get_settings
from koomy.session.store import SessionStore
from koomy.tenant.resolver import Location, TenantAssets, TenantResolver
from koomy.tenant.white_label import WhiteLabelStore
from koomy.theming.document import Document
from koomy.types import UploadKind
from koomy.uploads.flow import Notifier, UploadFlow

logger = structlog.get_logger(__name__)


@dataclass
class KoomyApp:
    """Holds the shared state containers and routes page events into them."""

    api: ApiClient
    document: Document
    window_location: Location | None
    session: SessionStore = field(default_factory=SessionStore)
    tenant_resolver: TenantResolver = field(default_factory=TenantResolver)
    white_label: WhiteLabelStore | None = None

    def __post_init__(self) -> None:
        if self.white_label is None:
            hostname = self.window_location.hostname if self.window_location else ""
            self.white_label = WhiteLabelStore(self.api, self.document, hostname=hostname)
        self.queries = Queries(self.api)

    async def start(self) -> TenantAssets:
        """Page load: pick brand assets, then fetch branding."""
        path = self.window_location.path if self.window_location else "/"
        assets = self.navigate(path)
        if self.white_label is not None:
            await self.white_label.load()
        return assets

    def navigate(self, path: str) -> TenantAssets:
        return self.tenant_resolver.on_navigate(self.document, self.window_location, path)

    async def login(self, email: str, password: str, *, admin: bool = False) -> None:
        """Log in, then load the community list so the selection can resolve."""
        await self.session.login(self.api, email, password, admin=admin)
        self._bind_selection()
        await self.session.load_communities(self.api)

    def select_community(self, community_id: str) -> None:
        self.session.select_community(community_id)
        self._bind_selection()

    def logout(self) -> None:
        self.session.logout()
        self.api.cache.clear()
        clear_tenant_context(community_only=True)

    def _bind_selection(self) -> None:
        community_id = self.session.snapshot().community_id
        if community_id is not None:
            bind_tenant_context(community_id=community_id)

    def uploader(self, kind: UploadKind, notifier: Notifier | None = None) -> UploadFlow:
        return UploadFlow.from_settings(self.api, kind, notifier=notifier)

    async def close(self) -> None:
        await self.api.aclose()


def create_app(
    window_location: Location | None = None,
    document: Document | None = None,
    api: ApiClient | None = None,
) -> KoomyApp:
    """Create and configure the client application."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)
    clear_tenant_context()
    bind_tenant_context(hostname=window_location.hostname if window_location else "")

    app = KoomyApp(
        api=api or ApiClient.from_settings(),
        document=document or Document(),
        window_location=window_location,
    )
    logger.info(
        "koomy_app_created",
        hostname=window_location.hostname if window_location else "",
        api_base_url=settings.api_base_url,
    )
    return app
