"""
Configuration management for Calendar Assistant.

Uses Pydantic Settings for type-safe environment variable loading.
Configured via .env file in project root.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    See .env.example for available options.
    """

    # Python & Application
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Application environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Messaging
    telegram_bot_token: str = Field(
        default="",
        description="Telegram bot token from BotFather"
    )

    # LLM Provider
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key"
    )
    extraction_models: list[str] = Field(
        default_factory=lambda: [
            "claude-sonnet-4-20250514",
            "claude-3-5-haiku-20241022",
        ],
        description="Priority-ordered models tried for event extraction"
    )
    extraction_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for event extraction"
    )

    # Timezone Configuration
    default_timezone: str = Field(
        default="UTC",
        description="Timezone assumed when a description names none (IANA name)"
    )

    # Session state snapshot
    session_state_path: str = Field(
        default="./data/authCache.json",
        description="JSON file holding connected accounts and disabled calendars"
    )

    # Token database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/calendar_assistant.db",
        description="Async database URL for OAuth token storage"
    )

    # Google OAuth Configuration (for user calendars)
    google_oauth_client_id: str = Field(
        default="",
        description="Google OAuth 2.0 client ID"
    )
    google_oauth_client_secret: str = Field(
        default="",
        description="Google OAuth 2.0 client secret"
    )
    google_oauth_redirect_uri: str = Field(
        default="http://localhost:8000/auth/google/callback",
        description="OAuth redirect URI (must match Google Cloud Console)"
    )
    google_calendar_api_endpoint: str = Field(
        default="",
        description="Override for the Google Calendar API endpoint"
    )

    # External calls
    external_call_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds before an LLM, calendar or OAuth call is abandoned"
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.python_env == "production"

    @property
    def uses_google_oauth(self) -> bool:
        """Check if Google OAuth is configured."""
        return bool(self.google_oauth_client_id and self.google_oauth_client_secret)

    def get_llm_api_key(self) -> str:
        """
        Get the Anthropic API key.

        Raises:
            ValueError: If the API key is not configured
        """
        if not self.anthropic_api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY not configured. "
                "Please set it in your .env file."
            )
        return self.anthropic_api_key

    def validate_required_config(self) -> None:
        """
        Validate the credentials the assistant cannot run without.

        Raises:
            ValueError: If any required setting is missing
        """
        errors = []

        if not self.telegram_bot_token:
            errors.append("TELEGRAM_BOT_TOKEN is required.")
        if not self.anthropic_api_key:
            errors.append("ANTHROPIC_API_KEY is required.")
        if not self.uses_google_oauth:
            errors.append(
                "GOOGLE_OAUTH_CLIENT_ID and GOOGLE_OAUTH_CLIENT_SECRET are required."
            )
        if not self.extraction_models:
            errors.append("EXTRACTION_MODELS must name at least one model.")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure we only load settings once.
    Use this function throughout the application to access settings.

    Example:
        >>> from src.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.default_timezone)
    """
    return Settings()
