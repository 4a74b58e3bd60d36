"""Helpers shared by CLI commands."""

import typer
from rich.console import Console

from game_saver.config.settings import ConfigurationError, Settings, get_settings


console = Console(stderr=True)


def load_settings() -> Settings:
    """Load settings, turning configuration errors into a message and exit code 1."""
    try:
        return get_settings()
    except ConfigurationError as e:
        console.print(str(e), style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1) from e
