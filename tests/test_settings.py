"""
==============================================================================
Settings Tests
==============================================================================

Tests for defaults, environment overrides and derived properties.

==============================================================================
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from inventory.config import UDP_MAX_PAYLOAD, Settings, get_settings


class TestDefaults:
    """Tests for default values."""

    def test_transport_defaults(self):
        """Test the default endpoint and payload limit."""
        settings = Settings(_env_file=None)
        assert settings.host == "0.0.0.0"
        assert settings.port == 52333
        assert settings.max_payload_size == UDP_MAX_PAYLOAD == 65507
        assert settings.worker_threads == 0

    def test_no_products_file(self):
        """Test products_path is None when unset."""
        assert Settings(_env_file=None).products_path is None

    def test_products_path(self):
        """Test products_file is exposed as a Path."""
        settings = Settings(_env_file=None, products_file="data/products.json")
        assert settings.products_path == Path("data/products.json")


class TestEnvironment:
    """Tests for environment variable loading and validation."""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("PORT", "40000")
        monkeypatch.setenv("WORKER_THREADS", "4")
        settings = Settings(_env_file=None)
        assert settings.port == 40000
        assert settings.worker_threads == 4

    @pytest.mark.parametrize("raw, expected", [
        ("Production", "production"),
        (" staging ", "staging"),
        ("qa", "development"),
    ])
    def test_app_env_normalized(self, raw: str, expected: str):
        """Test app_env is lowercased and unknown values fall back."""
        assert Settings(_env_file=None, app_env=raw).app_env == expected

    @pytest.mark.parametrize("field, value", [
        ("port", 70000),
        ("max_payload_size", 100),
        ("receive_timeout", 0),
        ("worker_threads", -1),
    ])
    def test_out_of_range(self, field: str, value):
        """Test range-checked fields reject bad values."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})


class TestDerived:
    """Tests for computed properties."""

    def test_log_level(self):
        """Test debug switches the log level."""
        assert Settings(_env_file=None).log_level == logging.INFO
        assert Settings(_env_file=None, debug=True).log_level == logging.DEBUG

    def test_environment_flags(self):
        """Test is_development / is_production."""
        settings = Settings(_env_file=None, app_env="production")
        assert settings.is_production
        assert not settings.is_development

    def test_get_settings_is_cached(self):
        """Test get_settings returns one shared instance."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
