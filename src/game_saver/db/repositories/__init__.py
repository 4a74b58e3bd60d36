"""Repository layer for database operations."""

from game_saver.db.repositories.account_repo import AccountRepository


__all__ = ["AccountRepository"]
