"""API middleware for the Game Saver server."""

from game_saver.api.middleware.errors import setup_error_handlers


__all__ = ["setup_error_handlers"]
