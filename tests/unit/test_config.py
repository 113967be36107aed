# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from intervention_tracker.core.config.settings import (
    AuthSettings,
    CORSSettings,
    DatabaseSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestDatabaseSettings:
    """Tests for DatabaseSettings."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = DatabaseSettings()

        assert settings.user == "tracker"
        assert settings.host == "localhost"
        assert settings.port == 5432
        assert settings.database == "intervention_tracker"
        assert settings.pool_size == 10
        assert settings.max_overflow == 20

    def test_url_from_components(self) -> None:
        """Test URL property builds the asyncpg connection string."""
        with patch.dict(os.environ, {}, clear=True):
            settings = DatabaseSettings(
                user="u",
                password="p",  # type: ignore[arg-type]
                host="db.example.com",
                port=5433,
                database="tracker_db",
            )

        assert settings.url == "postgresql+asyncpg://u:p@db.example.com:5433/tracker_db"
        assert settings.is_sqlite is False

    def test_url_override_from_environment(self) -> None:
        """Test that DATABASE_URL wins over the components."""
        with patch.dict(os.environ, {"DATABASE_URL": "sqlite+aiosqlite:///tmp.db"}, clear=True):
            settings = DatabaseSettings()

        assert settings.url == "sqlite+aiosqlite:///tmp.db"
        assert settings.is_sqlite is True

    def test_password_is_secret(self) -> None:
        with patch.dict(os.environ, {"DB_PASSWORD": "hunter2"}, clear=True):
            settings = DatabaseSettings()

        assert "hunter2" not in repr(settings)
        assert settings.password.get_secret_value() == "hunter2"


class TestAuthSettings:
    """Tests for AuthSettings."""

    def test_environment_prefix(self) -> None:
        env = {"AUTH_ALGORITHM": "HS512", "AUTH_DEFAULT_ROLE": "Counselor"}
        with patch.dict(os.environ, env, clear=True):
            settings = AuthSettings()

        assert settings.algorithm == "HS512"
        assert settings.default_role == "Counselor"
        assert settings.audience is None


class TestRateLimitAndCors:
    """Tests for rate limit and CORS settings."""

    def test_rate_limit_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = RateLimitSettings()

        assert settings.enabled is True
        assert settings.requests_per_minute == 120

    def test_origins_list_parsing(self) -> None:
        settings = CORSSettings(origins="http://a.test, http://b.test ,")

        assert settings.origins_list == ["http://a.test", "http://b.test"]


class TestSettings:
    """Tests for the aggregated Settings."""

    def test_production_rejects_default_secret(self) -> None:
        """Test that production refuses to start with the default secret."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
            with pytest.raises(ValidationError, match="Session secret key"):
                Settings(_env_file=None)

    def test_production_with_secret(self) -> None:
        env = {"ENVIRONMENT": "production", "AUTH_SECRET_KEY": "a-real-secret"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.is_production
        assert not settings.is_development

    def test_get_settings_is_cached(self) -> None:
        clear_settings_cache()
        first = get_settings()

        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first
