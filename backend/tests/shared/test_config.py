"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self, monkeypatch):
        """Settings should have sensible defaults."""
        monkeypatch.delenv("SUPABASE_JWT_SECRET", raising=False)
        settings = Settings()
        assert settings.app_name == "FirstPrinciple API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.frontend_url == "http://localhost:3000"
        assert settings.supabase_jwt_secret == ""

    def test_deep_link_defaults(self):
        """Deep link settings should default to the production app."""
        settings = Settings()
        assert settings.app_scheme == "firstprinciplebiz"
        assert "www.firstprinciple.biz" in settings.universal_link_hosts
        assert "firstprinciple.biz" in settings.universal_link_hosts

    def test_auth_defaults(self):
        """Auth settings should match the sign-up screens."""
        settings = Settings()
        assert settings.oauth_provider == "google"
        assert settings.min_password_length == 6

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings()
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
        }):
            settings = Settings()
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"
            assert settings.supabase_service_role_key == "test-service-key"

    def test_loads_list_settings_from_env(self):
        """List settings should parse JSON from the environment."""
        with patch.dict(os.environ, {"UNIVERSAL_LINK_HOSTS": '["links.example.com"]'}):
            settings = Settings()
            assert settings.universal_link_hosts == ["links.example.com"]

    def test_env_is_case_insensitive(self):
        """Lower-case variable names should also be read."""
        with patch.dict(os.environ, {"app_scheme": "fpdev"}):
            settings = Settings()
            assert settings.app_scheme == "fpdev"


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
