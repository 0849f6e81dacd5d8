"""Tests for configuration module."""

import os
from unittest.mock import patch

import pytest

from cardhack.core.config import (
    DEFAULT_API_BASE,
    DEFAULT_CARD_BACK,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear the settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestGetSettings:
    """Tests for get_settings function."""

    def test_default_values(self):
        """Settings use defaults when environment variables are not set."""
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()

        assert settings.api_base == DEFAULT_API_BASE
        assert settings.client_sid is None
        assert settings.request_timeout == 10.0
        assert settings.display_count == 3
        assert settings.default_card_back == DEFAULT_CARD_BACK
        assert settings.cors_origins == ("http://localhost:5173",)

    def test_overrides_from_environment(self):
        env = {
            "CARDHACK_API_BASE": "https://host.test/",
            "CARDHACK_CLIENT_SID": "sid",
            "CARDHACK_REQUEST_TIMEOUT": "2.5",
            "CARDHACK_DISPLAY_COUNT": "5",
            "CARDHACK_CORS_ORIGINS": "http://a.test, http://b.test",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_settings()

        assert settings.api_base == "https://host.test"
        assert settings.client_sid == "sid"
        assert settings.request_timeout == 2.5
        assert settings.display_count == 5
        assert settings.cors_origins == ("http://a.test", "http://b.test")

    def test_empty_client_sid_is_none(self):
        with patch.dict(os.environ, {"CARDHACK_CLIENT_SID": ""}, clear=True):
            assert get_settings().client_sid is None

    def test_invalid_display_count(self):
        with patch.dict(os.environ, {"CARDHACK_DISPLAY_COUNT": "0"}, clear=True):
            with pytest.raises(ValueError, match="at least 1"):
                get_settings()

    def test_settings_are_cached(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_settings() is get_settings()

    def test_max_open_draws(self):
        with patch.dict(os.environ, {"CARDHACK_MAX_OPEN_DRAWS": "25"}, clear=True):
            assert get_settings().max_open_draws == 25

    def test_invalid_max_open_draws(self):
        with patch.dict(os.environ, {"CARDHACK_MAX_OPEN_DRAWS": "0"}, clear=True):
            with pytest.raises(ValueError, match="at least 1"):
                get_settings()
