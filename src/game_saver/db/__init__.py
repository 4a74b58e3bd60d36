"""Database package for SQLite persistence."""

from game_saver.db.engine import Database, get_db_url, open_database
from game_saver.db.models import AccountType, GameAccount


__all__ = [
    "AccountType",
    "Database",
    "GameAccount",
    "get_db_url",
    "open_database",
]
