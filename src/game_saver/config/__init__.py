"""Configuration module for Game Saver."""

from .settings import (
    ClientSettings,
    ConfigurationError,
    DatabaseSettings,
    LeasingSettings,
    SecuritySettings,
    ServerSettings,
    Settings,
    get_settings,
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
