"""Settings configuration for the Game Saver server and CLI."""

import os
import secrets
import tomllib
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from game_saver.config.discovery import (
    find_toml_config_file,
    get_game_saver_data_dir,
)


__all__ = [
    "ClientSettings",
    "ConfigurationError",
    "DatabaseSettings",
    "LeasingSettings",
    "SecuritySettings",
    "ServerSettings",
    "Settings",
    "get_settings",
]

logger = structlog.get_logger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=8000, ge=1, le=65535, description="Port to bind")
    reload: bool = Field(default=False, description="Enable auto-reload")
    log_level: LogLevel = Field(default="INFO", description="Root log level")
    log_file: Path | None = Field(default=None, description="Optional log file")
    json_logs: bool = Field(default=False, description="Render logs as JSON")


class DatabaseSettings(BaseModel):
    """Account store configuration."""

    path: Path = Field(
        default_factory=lambda: get_game_saver_data_dir() / "game_saver.db",
        description="SQLite database file",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")


class SecuritySettings(BaseModel):
    """Session token configuration."""

    session_secret: str | None = Field(
        default=None,
        description="Secret key for signing session JWTs (auto-generated if not set)",
    )
    session_secret_generated: bool = Field(
        default=False,
        description="Whether the session secret was auto-generated",
    )
    session_ttl_days: int = Field(default=7, ge=1, le=365)
    cookie_name: str = Field(default="game-saver-session", min_length=1)

    @model_validator(mode="after")
    def ensure_session_secret(self) -> "SecuritySettings":
        """Generate a session secret if none was configured."""
        if not self.session_secret:
            self.session_secret = secrets.token_hex(32)
            self.session_secret_generated = True
        return self


class LeasingSettings(BaseModel):
    """Bounds for online account leases, in whole hours."""

    min_hours: int = Field(default=1, ge=1)
    max_hours: int = Field(default=24, ge=1, le=168)

    @model_validator(mode="after")
    def check_bounds(self) -> "LeasingSettings":
        if self.min_hours > self.max_hours:
            raise ValueError(
                f"min_hours ({self.min_hours}) must not exceed max_hours ({self.max_hours})"
            )
        return self


class ClientSettings(BaseModel):
    """Defaults for CLI commands that talk to a running server."""

    server_url: str = Field(default="http://127.0.0.1:8000")
    token: str | None = Field(default=None, description="Session token")
    timeout_seconds: float = Field(default=30.0, gt=0)


class Settings(BaseSettings):
    """
    Configuration settings for Game Saver.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Nested sections use a double underscore in environment variables, for example
    LEASING__MAX_HOURS=12 or SECURITY__SESSION_SECRET=...
    TOML configuration files are looked up in the following order:
    1. CONFIG_FILE environment variable
    2. .game_saver.toml / game_saver.toml in current directory
    3. config.toml in user config directory/game_saver/ (platform-specific)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    leasing: LeasingSettings = Field(default_factory=LeasingSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ValueError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Auto-discover config file or use CONFIG_FILE env var
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            if config_path.suffix.lower() != ".toml":
                raise ValueError(
                    f"Unsupported config file format: {config_path.suffix}. "
                    "Only TOML (.toml) files are supported."
                )
            config_data = cls.load_toml_config(config_path)
            logger.debug("config_file_loaded", path=str(config_path))

        # kwargs take precedence over file values
        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None, **overrides: Any) -> Settings:
    """Build settings from the environment and the discovered config file.

    Raises:
        ConfigurationError: If the file cannot be read or values are invalid.
    """
    try:
        settings = Settings.from_config(config_path=config_path, **overrides)
    except (OSError, ValueError, PydanticValidationError) as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e

    if settings.security.session_secret_generated:
        logger.warning(
            "session_secret_generated",
            message="Session tokens will not survive a restart; set SECURITY__SESSION_SECRET",
        )
    return settings
