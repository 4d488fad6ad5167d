"""
Unit tests for src/config.py

Tests Settings defaults, environment loading, required-credential
validation and caching.
"""

import pytest
from pydantic import ValidationError

from src.config import Settings, get_settings

REQUIRED_ENV = {
    "TELEGRAM_BOT_TOKEN": "123:abc",
    "ANTHROPIC_API_KEY": "sk-ant-test",
    "GOOGLE_OAUTH_CLIENT_ID": "client-id",
    "GOOGLE_OAUTH_CLIENT_SECRET": "client-secret",
}


@pytest.fixture
def clean_env(monkeypatch):
    for name in REQUIRED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("EXTRACTION_MODELS", raising=False)
    return monkeypatch


class TestSettingsDefaults:
    """Test Settings initialization with default values."""

    def test_settings_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.python_env == "development"
        assert settings.log_level == "INFO"
        assert settings.default_timezone == "UTC"
        assert settings.session_state_path == "./data/authCache.json"
        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.extraction_models == [
            "claude-sonnet-4-20250514",
            "claude-3-5-haiku-20241022",
        ]
        assert settings.external_call_timeout == 60.0
        assert settings.api_port == 8000

    def test_is_production_when_set(self):
        settings = Settings(_env_file=None, python_env="production")
        assert settings.is_production is True
        assert settings.is_development is False

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, python_env="staging")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, external_call_timeout=0)


class TestEnvironmentLoading:
    def test_reads_environment(self, clean_env):
        clean_env.setenv("DEFAULT_TIMEZONE", "America/New_York")
        clean_env.setenv("EXTRACTION_MODELS", '["claude-3-5-haiku-20241022"]')

        settings = Settings(_env_file=None)

        assert settings.default_timezone == "America/New_York"
        assert settings.extraction_models == ["claude-3-5-haiku-20241022"]


class TestValidateRequiredConfig:
    """Test required credential checks."""

    def test_all_present(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        Settings(_env_file=None).validate_required_config()

    def test_lists_every_missing_setting(self, clean_env):
        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None).validate_required_config()

        message = str(exc_info.value)
        assert "TELEGRAM_BOT_TOKEN" in message
        assert "ANTHROPIC_API_KEY" in message
        assert "GOOGLE_OAUTH_CLIENT_ID" in message

    def test_empty_model_list(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        with pytest.raises(ValueError, match="EXTRACTION_MODELS"):
            Settings(_env_file=None, extraction_models=[]).validate_required_config()

    def test_get_llm_api_key(self, clean_env):
        with pytest.raises(ValueError, match="ANTHROPIC_API_KEY not configured"):
            Settings(_env_file=None).get_llm_api_key()
        assert Settings(_env_file=None, anthropic_api_key="k").get_llm_api_key() == "k"


class TestGetSettings:
    def test_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
