"""Requester identity for the API."""

from game_saver.auth.sessions import Requester, Role, SessionTokenHandler


__all__ = ["Requester", "Role", "SessionTokenHandler"]
