"""Configuration management using Pydantic Settings.

Loads configuration from multiple sources with the following priority (highest first):
1. Environment variables (AIHUB_* prefix)
2. .env file
3. config.local.yaml (if exists)
4. config.yaml
5. Default values
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aihub.ai.catalog import CatalogSettings
from aihub.ai.crypto import MIN_SECRET_LENGTH


class CorsSettings(BaseModel):
    """CORS configuration."""

    allowed_origins: list[str] = ["http://localhost:3000"]
    allowed_methods: list[str] = ["GET", "POST", "OPTIONS"]
    allowed_headers: list[str] = [
        "Content-Type",
        "Authorization",
        "X-API-Key",
        "X-Request-ID",
    ]


class ServerSettings(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4
    timeout_seconds: int = 300
    cors: CorsSettings = Field(default_factory=CorsSettings)


class ApiKeyConfig(BaseModel):
    """API key configuration."""

    key: str
    name: str


class JwtSettings(BaseModel):
    """JWT authentication settings."""

    secret: str | None = None
    algorithm: str = "HS256"
    issuer: str | None = None
    audience: str | None = None


class AuthSettings(BaseModel):
    """Authentication configuration."""

    mode: Literal["none", "api_key", "jwt"] = "none"
    api_keys: list[ApiKeyConfig] = Field(default_factory=list)
    jwt: JwtSettings = Field(default_factory=JwtSettings)


class SecuritySettings(BaseModel):
    """Secrets used to protect stored provider credentials."""

    encryption_key: str = ""


class AISettings(BaseModel):
    """Defaults applied to provider adapters."""

    request_timeout_seconds: float | None = Field(
        default=60.0,
        gt=0,
        description="Vendor request timeout used when a provider sets none",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class HealthSettings(BaseModel):
    """Health check configuration."""

    provider_check_enabled: bool = True
    timeout_seconds: int = 5


def _load_yaml_config(config_dir: Path) -> dict:
    """Load configuration from YAML files.

    Loads config.yaml and optionally overlays config.local.yaml.
    """
    config = {}

    config_file = config_dir / "config.yaml"
    if config_file.exists():
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    local_config_file = config_dir / "config.local.yaml"
    if local_config_file.exists():
        with open(local_config_file) as f:
            local_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, local_config)

    return config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Settings(BaseSettings):
    """Application settings loaded from environment, .env, and config files."""

    model_config = SettingsConfigDict(
        env_prefix="AIHUB_",
        env_nested_delimiter="__",
        env_file=Path.home() / "aihub.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    ai: AISettings = Field(default_factory=AISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)

    # Direct environment variable mapping shared with other deployments
    encryption_key_env: str | None = Field(default=None, validation_alias="ENCRYPTION_KEY")

    def __init__(self, config_dir: Path | None = None, **data):
        """Initialize settings, loading from YAML if config_dir provided."""
        if config_dir is not None:
            yaml_config = _load_yaml_config(config_dir)
            # Merge YAML config with any explicit data (explicit data wins)
            merged = _deep_merge(yaml_config, data)
            super().__init__(**merged)
        else:
            super().__init__(**data)

        # Apply ENCRYPTION_KEY environment variable if no key is configured
        if self.encryption_key_env and not self.security.encryption_key:
            self.security.encryption_key = self.encryption_key_env

    def validate_required(self) -> None:
        """Validate that required settings are present.

        Raises:
            ValueError: If required settings are missing.
        """
        if not self.security.encryption_key:
            raise ValueError(
                "ENCRYPTION_KEY environment variable or security.encryption_key config is required"
            )

        if len(self.security.encryption_key) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"Encryption key must be at least {MIN_SECRET_LENGTH} characters long"
            )

        if self.auth.mode == "jwt" and not self.auth.jwt.secret:
            raise ValueError("JWT secret is required when auth mode is 'jwt'")

        if self.auth.mode == "api_key" and not self.auth.api_keys:
            raise ValueError("At least one API key is required when auth mode is 'api_key'")


@lru_cache
def get_settings(config_dir: Path | None = None) -> Settings:
    """Get cached settings instance.

    Args:
        config_dir: Optional path to config directory. If None, only environment
                   variables and .env file are used.

    Returns:
        Settings instance.
    """
    if config_dir is None:
        # Try to find config directory relative to project root
        project_root = Path(__file__).parent.parent.parent
        default_config_dir = project_root / "config"
        if default_config_dir.exists():
            config_dir = default_config_dir

    return Settings(config_dir=config_dir)
