"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class OgsSettings(BaseSettings):
    """Library settings loaded from environment variables (``OGS_`` prefix)."""

    # Service
    service_name: str = "ogscraper"

    # HTTP transport (system-level)
    user_agent: str = "ogscraper/0.1.0"
    request_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="OGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate(self) -> None:
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if not self.user_agent.strip():
            raise ValueError("user_agent must not be empty")


_settings: OgsSettings | None = None


def get_settings() -> OgsSettings:
    global _settings
    if _settings is None:
        _settings = OgsSettings()
        _settings.validate()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
