"""Settings loader for anthropic-lite.

Loads configuration from settings/settings.toml (non-secrets) and the
environment or .env (secrets, e.g. ANTHROPIC_API_KEY).
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Path to settings.toml (relative to this file)
SETTINGS_DIR = Path(__file__).parent
SETTINGS_TOML_PATH = SETTINGS_DIR / "settings.toml"

DEFAULT_BASE_URL = "https://api.anthropic.com/"


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    base_url: str = DEFAULT_BASE_URL
    api_version: str = "v1"
    anthropic_version: str = "2023-06-01"
    timeout: float = Field(default=600.0, gt=0)
    connect_timeout: float = Field(default=5.0, gt=0)
    default_model: str = "claude-3-5-sonnet-20240620"
    default_max_tokens: int = Field(default=1024, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_format: bool = False


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    metrics_enabled: bool = True


class TomlSettings(BaseModel):
    """Settings loaded from TOML file."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


class Settings(BaseSettings):
    """Combined settings from TOML (non-secrets) and .env (secrets).

    Usage:
        from settings import get_settings
        settings = get_settings()
    """

    model_config = SettingsConfigDict(
        env_prefix="ANTHROPIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Secrets from .env
    api_key: str | None = None

    # Non-secret settings from TOML
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def base_url(self) -> str:
        return self.client.base_url

    @property
    def api_version(self) -> str:
        return self.client.api_version

    @property
    def anthropic_version(self) -> str:
        return self.client.anthropic_version

    @property
    def default_model(self) -> str:
        return self.client.default_model

    @property
    def metrics_enabled(self) -> bool:
        return self.observability.metrics_enabled


def load_toml_settings() -> dict[str, Any]:
    """Load settings from TOML file.

    Returns:
        Dictionary of settings from TOML file, or empty dict if file doesn't exist.
    """
    if not SETTINGS_TOML_PATH.exists():
        return {}

    with open(SETTINGS_TOML_PATH, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def get_settings() -> Settings:
    """Load and return the combined settings.

    Loads non-secrets from settings/settings.toml and secrets from .env.

    Returns:
        Settings object with all configuration.
    """
    toml_data = load_toml_settings()

    # Parse TOML sections into Pydantic models
    toml_settings = TomlSettings(**toml_data)

    # TOML values win for non-secrets; the api key only comes from env/.env
    return Settings(
        client=toml_settings.client,
        logging=toml_settings.logging,
        observability=toml_settings.observability,
    )


# Module-level singleton for convenience
_settings: Settings | None = None


def settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings object with all configuration.
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from files.

    Returns:
        Fresh Settings object.
    """
    global _settings
    _settings = get_settings()
    return _settings
