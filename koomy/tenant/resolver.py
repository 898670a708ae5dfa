"""Per-navigation favicon and web-app manifest resolution.

Each asset has its own ordered rule list; the first rule matching the
hostname or the route path wins, otherwise the asset's default applies.
The favicon rules cover more paths than the manifest rules, so the pro icon
can show on routes that still serve the default manifest.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from koomy.config.settings import get_settings
from koomy.theming.document import Document

logger = structlog.get_logger(__name__)

FAVICON_KOOMY = "/favicon-koomy.png"
FAVICON_APP_PRO = "/icons/koomy-icon-512.png"
MANIFEST_DEFAULT = "/manifest.json"
MANIFEST_PRO = "/manifest-pro.json"


@dataclass(frozen=True, slots=True)
class Location:
    hostname: str = ""
    path: str = "/"

    @classmethod
    def current(cls, window_location: Location | None, path: str | None = None) -> Location:
        """Location for a navigation; no window (server render) means no hostname."""
        hostname = window_location.hostname if window_location is not None else ""
        if path is None:
            path = window_location.path if window_location is not None else "/"
        return cls(hostname=hostname, path=path)


@dataclass(frozen=True, slots=True)
class AssetRule:
    """Matches an exact hostname, a path prefix or an exact path."""

    href: str
    hostnames: tuple[str, ...] = ()
    path_prefixes: tuple[str, ...] = ()
    exact_paths: tuple[str, ...] = ()

    def matches(self, location: Location) -> bool:
        if location.hostname in self.hostnames:
            return True
        if location.path in self.exact_paths:
            return True
        return any(location.path.startswith(prefix) for prefix in self.path_prefixes)


@dataclass(frozen=True, slots=True)
class AssetRuleSet:
    rules: tuple[AssetRule, ...]
    default: str

    def resolve(self, location: Location) -> str:
        for rule in self.rules:
            if rule.matches(location):
                return rule.href
        return self.default


@dataclass(frozen=True, slots=True)
class TenantAssets:
    favicon: str
    apple_touch_icon: str
    manifest: str


def build_favicon_rules(
    pro_hostname: str = "app-pro.koomy.app",
    koomy_hostnames: tuple[str, ...] = ("koomy.app", "app.koomy.app"),
) -> AssetRuleSet:
    return AssetRuleSet(
        rules=(
            AssetRule(
                href=FAVICON_KOOMY,
                hostnames=koomy_hostnames,
                path_prefixes=("/website", "/app/"),
                exact_paths=("/app",),
            ),
            AssetRule(
                href=FAVICON_APP_PRO,
                hostnames=(pro_hostname,),
                path_prefixes=("/app-pro", "/admin", "/platform"),
            ),
        ),
        default=FAVICON_APP_PRO,
    )


def build_manifest_rules(pro_hostname: str = "app-pro.koomy.app") -> AssetRuleSet:
    return AssetRuleSet(
        rules=(
            AssetRule(
                href=MANIFEST_PRO,
                hostnames=(pro_hostname,),
                path_prefixes=("/app-pro", "/admin"),
            ),
        ),
        default=MANIFEST_DEFAULT,
    )


class TenantResolver:
    """Re-evaluates brand assets on every route change and patches the document."""

    def __init__(
        self,
        favicon_rules: AssetRuleSet | None = None,
        manifest_rules: AssetRuleSet | None = None,
    ) -> None:
        if favicon_rules is None or manifest_rules is None:
            settings = get_settings()
            favicon_rules = favicon_rules or build_favicon_rules(
                settings.pro_hostname, tuple(settings.koomy_hostnames)
            )
            manifest_rules = manifest_rules or build_manifest_rules(settings.pro_hostname)
        self._favicon_rules = favicon_rules
        self._manifest_rules = manifest_rules

    def resolve(self, location: Location | None) -> TenantAssets:
        if location is None:
            location = Location()
        favicon = self._favicon_rules.resolve(location)
        return TenantAssets(
            favicon=favicon,
            apple_touch_icon=favicon,
            manifest=self._manifest_rules.resolve(location),
        )

    def apply(self, document: Document, location: Location | None) -> TenantAssets:
        """Resolve assets for ``location`` and update the existing links in place."""
        assets = self.resolve(location)
        document.set_link_href("icon", assets.favicon)
        document.set_link_href("apple-touch-icon", assets.apple_touch_icon)
        document.set_link_href("manifest", assets.manifest)
        logger.debug(
            "tenant_assets_applied",
            hostname=location.hostname if location else "",
            path=location.path if location else "/",
            favicon=assets.favicon,
            manifest=assets.manifest,
        )
        return assets

    def on_navigate(
        self, document: Document, window_location: Location | None, path: str
    ) -> TenantAssets:
        """Route-change hook: keeps the window's hostname, swaps in the new path."""
        return self.apply(document, Location.current(window_location, path))
