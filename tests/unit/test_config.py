import pytest

from koomy.config.settings import MAX_UPLOAD_BYTES, Settings, get_settings
from koomy.exceptions import ConfigError


@pytest.mark.unit
class TestSettings:
    def test_default_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("API_BASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "http://localhost:5000"
        assert settings.api_prefix == "/api"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.white_label_stale_seconds == 300
        assert settings.white_label_cache_per_host is False
        assert settings.upload_max_bytes == MAX_UPLOAD_BYTES == 5 * 1024 * 1024
        assert settings.pro_hostname == "app-pro.koomy.app"
        assert settings.koomy_hostnames == ["koomy.app", "app.koomy.app"]

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "https://api.koomy.app")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("WHITE_LABEL_STALE_SECONDS", "60")
        monkeypatch.setenv("KOOMY_HOSTNAMES", '["koomy.app"]')
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "https://api.koomy.app"
        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.white_label_stale_seconds == 60
        assert settings.koomy_hostnames == ["koomy.app"]


@pytest.mark.unit
class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_non_positive_upload_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPLOAD_MAX_BYTES", "0")
        get_settings.cache_clear()
        with pytest.raises(ConfigError, match="UPLOAD_MAX_BYTES"):
            get_settings()

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)

    def test_warns_on_plain_http(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "http://api.koomy.app")
        get_settings.cache_clear()
        with pytest.warns(UserWarning, match="https"):
            get_settings()

    def test_no_warning_in_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import warnings

        monkeypatch.setenv("API_BASE_URL", "http://localhost:5000")
        monkeypatch.setenv("DEBUG", "true")
        get_settings.cache_clear()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert get_settings().debug is True
