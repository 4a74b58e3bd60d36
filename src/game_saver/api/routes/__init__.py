"""API routes for the Game Saver server."""

from game_saver.api.routes.accounts import router as accounts_router
from game_saver.api.routes.admin import router as admin_router
from game_saver.api.routes.games import router as games_router
from game_saver.api.routes.health import router as health_router
from game_saver.api.routes.users import router as users_router


__all__ = [
    "accounts_router",
    "admin_router",
    "games_router",
    "health_router",
    "users_router",
]
