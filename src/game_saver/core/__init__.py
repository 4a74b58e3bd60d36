"""Core helpers shared across the Game Saver packages."""

from game_saver.core.system import get_xdg_config_home, get_xdg_data_home
from game_saver.core.time import ensure_utc, seconds_until, utc_now


__all__ = [
    "ensure_utc",
    "get_xdg_config_home",
    "get_xdg_data_home",
    "seconds_until",
    "utc_now",
]
