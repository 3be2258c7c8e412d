"""Tests for wren.config — AppConfig defaults and environment loading."""

import pytest

from wren.config import AppConfig
from wren.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.max_content_length == 16 * 1024 * 1024
        assert config.log_level == "info"

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.port = 1  # type: ignore[misc]


class TestFromEnv:
    def test_reads_prefixed_values(self) -> None:
        config = AppConfig.from_env(
            environ={"WREN_PORT": "3000", "WREN_DEBUG": "yes", "WREN_HOST": "0.0.0.0"}
        )
        assert config.port == 3000
        assert config.debug is True
        assert config.host == "0.0.0.0"

    def test_custom_prefix(self) -> None:
        config = AppConfig.from_env("APP_", environ={"APP_LOG_LEVEL": "debug", "WREN_PORT": "1"})
        assert config.log_level == "debug"
        assert config.port == 8000

    def test_overrides_win(self) -> None:
        config = AppConfig.from_env(environ={"WREN_PORT": "3000"}, port=4000)
        assert config.port == 4000

    def test_optional_field(self) -> None:
        assert AppConfig.from_env(environ={"WREN_STATIC_DIR": ""}).static_dir is None
        assert AppConfig.from_env(environ={"WREN_STATIC_DIR": "public"}).static_dir == "public"

    def test_invalid_int(self) -> None:
        with pytest.raises(ConfigurationError, match="WREN_PORT|port"):
            AppConfig.from_env(environ={"WREN_PORT": "eighty"})

    def test_invalid_bool(self) -> None:
        with pytest.raises(ConfigurationError, match="debug"):
            AppConfig.from_env(environ={"WREN_DEBUG": "maybe"})
