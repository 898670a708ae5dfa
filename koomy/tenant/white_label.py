"""White-label branding for the current host.

The config is fetched once, cached for a staleness window, and turned into
display values with a fixed precedence: brand config field, then the
community-level field, then the Koomy default. When branding is active the
brand colour is pushed to the document root as CSS custom properties.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from koomy.config.settings import DEFAULT_APP_NAME, DEFAULT_BRAND_COLOR, get_settings
from koomy.exceptions import ApiError
from koomy.models.domain import BrandConfig, WhiteLabelConfig
from koomy.theming.color import hex_to_hsl

if TYPE_CHECKING:
    from koomy.api.client import ApiClient
    from koomy.theming.document import Document

logger = structlog.get_logger(__name__)

CACHE_KEY = "white-label-config"

CSS_BRAND_COLOR = "--wl-brand-color"
CSS_BRAND_H = "--wl-brand-h"
CSS_BRAND_S = "--wl-brand-s"
CSS_BRAND_L = "--wl-brand-l"
CSS_BRAND_VARS = (CSS_BRAND_COLOR, CSS_BRAND_H, CSS_BRAND_S, CSS_BRAND_L)


class WhiteLabelStore:
    def __init__(
        self,
        api: ApiClient,
        document: Document | None = None,
        *,
        hostname: str | None = None,
        stale_seconds: float | None = None,
        per_host_cache: bool | None = None,
    ) -> None:
        if stale_seconds is None or per_host_cache is None:
            settings = get_settings()
            if stale_seconds is None:
                stale_seconds = settings.white_label_stale_seconds
            if per_host_cache is None:
                per_host_cache = settings.white_label_cache_per_host
        self._api = api
        self._document = document
        self._hostname = hostname or ""
        self._stale_seconds = stale_seconds
        self._per_host_cache = per_host_cache
        self._config: WhiteLabelConfig | None = None
        self._is_loading = False
        self._applied_color: str | None = None

    @property
    def cache_key(self) -> tuple[str, ...]:
        if self._per_host_cache:
            return (CACHE_KEY, self._hostname)
        return (CACHE_KEY,)

    async def load(self) -> WhiteLabelConfig | None:
        """Fetch (or reuse) the config and apply theming.

        A failed fetch leaves the previous config in place, which for a fresh
        store means non-branded mode.
        """
        self._is_loading = True
        try:
            config = await self._api.cache.fetch(
                self.cache_key, self._api.white_label.get_config, stale_seconds=self._stale_seconds
            )
        except ApiError as exc:
            logger.warning("white_label_config_failed", error=exc.message, hostname=self._hostname)
            return self._config
        finally:
            self._is_loading = False

        self._config = config
        logger.debug(
            "white_label_config_loaded",
            white_label=config.white_label,
            community_id=config.community_id,
        )
        self.apply_theme()
        return config

    async def refresh(self) -> WhiteLabelConfig | None:
        """Drop the cached config and fetch again."""
        self._api.cache.invalidate(*self.cache_key)
        return await self.load()

    # --- derived values ---

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def white_label_config(self) -> WhiteLabelConfig | None:
        return self._config

    @property
    def is_white_label(self) -> bool:
        return self._config is not None and self._config.white_label

    @property
    def community_id(self) -> str | None:
        if not self.is_white_label or self._config is None:
            return None
        return self._config.community_id

    @property
    def brand_config(self) -> BrandConfig | None:
        if not self.is_white_label or self._config is None:
            return None
        return self._config.brand_config

    @property
    def app_name(self) -> str:
        brand = self.brand_config
        community_name = self._config.community_name if self._config else None
        return (brand and brand.app_name) or community_name or DEFAULT_APP_NAME

    @property
    def brand_color(self) -> str:
        brand = self.brand_config
        return (brand and brand.brand_color) or DEFAULT_BRAND_COLOR

    @property
    def logo_url(self) -> str | None:
        brand = self.brand_config
        community_logo = self._config.community_logo if self._config else None
        return (brand and brand.logo_url) or community_logo or None

    @property
    def show_powered_by(self) -> bool:
        brand = self.brand_config
        return brand is None or brand.show_powered_by is not False

    # --- side effects ---

    def apply_theme(self) -> None:
        """Sync the brand colour variables on the document root.

        Written once per distinct colour while branding is active, and
        removed again when a refreshed config turns branding off.
        """
        if self._document is None:
            return
        if not self.is_white_label:
            if self._applied_color is not None:
                for name in CSS_BRAND_VARS:
                    self._document.remove_style_property(name)
                self._applied_color = None
                logger.debug("white_label_theme_cleared", hostname=self._hostname)
            return
        color = self.brand_color
        if color == self._applied_color:
            return
        self._document.set_style_property(CSS_BRAND_COLOR, color)
        hsl = hex_to_hsl(color)
        if hsl is not None:
            self._document.set_style_property(CSS_BRAND_H, str(hsl.h))
            self._document.set_style_property(CSS_BRAND_S, f"{hsl.s}%")
            self._document.set_style_property(CSS_BRAND_L, f"{hsl.l}%")
        else:
            # Drop HSL left over from a previous colour.
            for name in (CSS_BRAND_H, CSS_BRAND_S, CSS_BRAND_L):
                self._document.remove_style_property(name)
            logger.warning("white_label_color_unparsed", brand_color=color)
        self._applied_color = color
