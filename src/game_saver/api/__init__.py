"""API layer for the Game Saver server."""

from game_saver.api.app import create_app, get_app


__all__ = ["create_app", "get_app"]
