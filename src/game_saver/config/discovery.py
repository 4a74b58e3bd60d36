from pathlib import Path

from game_saver.core.system import get_xdg_config_home, get_xdg_data_home


CONFIG_FILE_NAMES = (".game_saver.toml", "game_saver.toml")


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for game_saver.

    Searches in the following order:
    1. .game_saver.toml / game_saver.toml in current directory
    2. config.toml in user config directory/game_saver/ (platform-specific)
    """
    candidates = [Path(name).resolve() for name in CONFIG_FILE_NAMES]
    candidates.append(get_game_saver_config_dir() / "config.toml")

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None


def get_game_saver_config_dir() -> Path:
    """Get the game_saver configuration directory."""
    return get_xdg_config_home() / "game_saver"


def get_game_saver_data_dir() -> Path:
    """Get the game_saver data directory (holds the SQLite database)."""
    return get_xdg_data_home() / "game_saver"
