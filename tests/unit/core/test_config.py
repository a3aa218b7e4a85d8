
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from gatehouse.core.config import DEFAULT_SECRET_KEY, Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    """Drop the suite-wide GATEHOUSE_* overrides."""
    for key in list(os.environ):
        if key.startswith("GATEHOUSE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()


def test_settings_defaults(clean_env):
    """Test that settings load with correct defaults."""
    settings = Settings(_env_file=None)

    assert settings.app_name == "Gatehouse"
    assert settings.environment == "development"
    assert settings.token_expire_days == 7
    assert settings.password_min_length == 6
    assert settings.store_timeout_seconds == 10.0
    assert settings.secret_key == DEFAULT_SECRET_KEY
    assert settings.is_development is True
    assert settings.is_production is False
    assert settings.is_testing is False


def test_settings_env_override(clean_env):
    """Test that environment variables override defaults."""
    with patch.dict(os.environ, {
        "GATEHOUSE_ENVIRONMENT": "production",
        "GATEHOUSE_SECRET_KEY": "a-real-production-secret-of-some-length",
        "GATEHOUSE_TOKEN_EXPIRE_DAYS": "14",
        "GATEHOUSE_STORE_TIMEOUT_SECONDS": "2.5",
    }):
        settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.token_expire_days == 14
        assert settings.store_timeout_seconds == 2.5
        assert settings.is_production is True


def test_production_rejects_default_secret(clean_env):
    with patch.dict(os.environ, {"GATEHOUSE_ENVIRONMENT": "production"}):
        with pytest.raises(ValidationError, match="GATEHOUSE_SECRET_KEY"):
            Settings(_env_file=None)


def test_development_allows_default_secret(clean_env):
    settings = Settings(_env_file=None, environment="development")

    assert settings.secret_key == DEFAULT_SECRET_KEY


@pytest.mark.parametrize(
    "field,value",
    [
        ("token_expire_days", 0),
        ("password_min_length", -1),
        ("store_timeout_seconds", 0),
    ],
)
def test_non_positive_values_rejected(clean_env, field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_get_settings_is_cached(settings):
    assert get_settings() is settings

    get_settings.cache_clear()

    assert get_settings() is not settings


def test_suite_environment(settings):
    """The shared test environment is applied through the env prefix."""
    assert settings.is_testing is True
    assert settings.argon2_memory_cost == 1024
