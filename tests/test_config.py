"""
🧪 test_config.py — environment-driven settings
"""

import pytest
from pydantic import ValidationError

from menu_delivery.core.config import EnvironmentMode, Settings


def test_defaults_select_development():
    settings = Settings(env_mode="development")

    assert settings.is_development
    assert not settings.use_real_services
    assert settings.geocoding_max_attempts == 2
    assert settings.geocoding_rate_limit_backoff_seconds == 1.2
    assert settings.default_prep_time_minutes == 30


def test_env_mode_is_case_insensitive():
    assert Settings(env_mode="PRODUCTION").env_mode == EnvironmentMode.PRODUCTION


def test_unknown_env_mode_is_rejected():
    with pytest.raises(ValidationError):
        Settings(env_mode="qa")


def test_environment_variables_override_defaults(monkeypatch):
    monkeypatch.setenv("GEOCODING_TIMEOUT_SECONDS", "3.5")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = Settings()

    assert settings.geocoding_timeout_seconds == 3.5
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]


def test_production_config_flags_unsafe_values():
    settings = Settings(
        env_mode="production",
        debug=True,
        database_url="sqlite+aiosqlite:///./menu.db",
        nominatim_user_agent=" ",
    )

    assert settings.validate_production_config() == [
        "NOMINATIM_USER_AGENT",
        "DATABASE_URL",
        "DEBUG",
    ]


def test_development_config_is_never_flagged():
    assert Settings(env_mode="development", debug=True).validate_production_config() == []
