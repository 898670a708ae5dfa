"""Client settings via Pydantic BaseSettings."""

from __future__ import annotations

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings

from koomy.exceptions import ConfigError

DEFAULT_APP_NAME = "Koomy"
DEFAULT_BRAND_COLOR = "#6366f1"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # API
    api_base_url: str = "http://localhost:5000"
    api_prefix: str = "/api"
    request_timeout: float = 30.0

    # App
    debug: bool = False
    log_level: str = "INFO"

    # White-label
    white_label_stale_seconds: int = 300
    white_label_cache_per_host: bool = False  # key the config cache by hostname

    # Uploads
    upload_max_bytes: int = MAX_UPLOAD_BYTES

    # Tenant hostnames
    pro_hostname: str = "app-pro.koomy.app"
    koomy_hostnames: list[str] = ["koomy.app", "app.koomy.app"]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    settings = Settings()
    if settings.upload_max_bytes <= 0:
        msg = "UPLOAD_MAX_BYTES must be positive"
        raise ConfigError(msg)
    if not settings.debug and not settings.api_base_url.startswith("https://"):
        warnings.warn(
            "API_BASE_URL is not using https. "
            "Set API_BASE_URL to the production API for deployed clients.",
            UserWarning,
            stacklevel=2,
        )
    return settings
