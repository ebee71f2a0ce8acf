"""
Tests for utils/config.py -- environment-backed settings.
"""

import pytest

from utils.config import DEFAULT_API_TIMEOUT, load_settings

BASE_ENV = {"DISCORD_TOKEN": "token", "PAL_API_URL": "https://api.example.com/api/pals"}


def _env(**overrides):
    env = dict(BASE_ENV)
    env.update(overrides)
    return {k: v for k, v in env.items() if v is not None}


class TestRequired:
    def test_minimal(self):
        settings = load_settings(_env())
        assert settings.discord_token == "token"
        assert settings.pal_api_url == "https://api.example.com/api/pals"
        assert settings.log_level == "INFO"
        assert settings.api_timeout == DEFAULT_API_TIMEOUT
        assert settings.command_prefix == "!"
        assert settings.healthcheck_port is None

    @pytest.mark.parametrize("missing", ["DISCORD_TOKEN", "PAL_API_URL"])
    def test_missing_value_aborts(self, missing):
        with pytest.raises(RuntimeError, match=missing):
            load_settings(_env(**{missing: None}))

    def test_blank_value_aborts(self):
        with pytest.raises(RuntimeError, match="DISCORD_TOKEN"):
            load_settings(_env(DISCORD_TOKEN="   "))

    @pytest.mark.parametrize("url", ["api.example.com", "ftp://api.example.com/pals", "https://"])
    def test_invalid_url(self, url):
        with pytest.raises(RuntimeError, match="PAL_API_URL"):
            load_settings(_env(PAL_API_URL=url))


class TestOptional:
    def test_overrides(self):
        settings = load_settings(
            _env(LOG_LEVEL="debug", PAL_API_TIMEOUT="7.5", COMMAND_PREFIX="?", HEALTHCHECK_PORT="8080")
        )
        assert settings.log_level == "DEBUG"
        assert settings.api_timeout == 7.5
        assert settings.command_prefix == "?"
        assert settings.healthcheck_port == 8080

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_bad_timeout(self, value):
        with pytest.raises(RuntimeError, match="PAL_API_TIMEOUT"):
            load_settings(_env(PAL_API_TIMEOUT=value))

    def test_bad_port(self):
        with pytest.raises(RuntimeError, match="HEALTHCHECK_PORT"):
            load_settings(_env(HEALTHCHECK_PORT="eighty"))
