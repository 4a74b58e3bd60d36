"""FastAPI application factory for the Game Saver server."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from game_saver import __version__
from game_saver.api.middleware.errors import setup_error_handlers
from game_saver.api.middleware.logging import AccessLogMiddleware
from game_saver.api.middleware.request_id import RequestIDMiddleware
from game_saver.api.middleware.session_auth import SessionAuthMiddleware
from game_saver.api.routes import (
    accounts_router,
    admin_router,
    games_router,
    health_router,
    users_router,
)
from game_saver.auth import SessionTokenHandler
from game_saver.config.settings import Settings, get_settings
from game_saver.core.logging import setup_logging
from game_saver.db import open_database
from game_saver.db.repositories import AccountRepository
from game_saver.leasing import LeaseService
from game_saver.leasing.service import Clock


logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, *, clock: Clock | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override. If None, uses get_settings().
        clock: Optional time source for the leasing engine.

    Returns:
        Configured FastAPI application instance.

    """
    if settings is None:
        settings = get_settings()

    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Open the account store and wire the leasing engine."""
        database = await open_database(
            settings.database.path, echo=settings.database.echo
        )
        repository = AccountRepository(database)
        service_kwargs = {"clock": clock} if clock is not None else {}
        app.state.database = database
        app.state.account_repository = repository
        app.state.lease_service = LeaseService(
            repository,
            min_hours=settings.leasing.min_hours,
            max_hours=settings.leasing.max_hours,
            **service_kwargs,
        )
        logger.info(
            "server_start",
            version=__version__,
            database=str(settings.database.path),
            max_hours=settings.leasing.max_hours,
        )

        yield

        logger.debug("server_stop")
        await database.dispose()

    app = FastAPI(
        title="Game Saver API",
        description="Shared game accounts with time-boxed leasing",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_error_handlers(app)

    token_handler = SessionTokenHandler(
        settings.security.session_secret or "",
        ttl_days=settings.security.session_ttl_days,
    )
    app.state.token_handler = token_handler

    # Middleware order is reversed: request ID runs first, then access log, then auth
    app.add_middleware(
        SessionAuthMiddleware,
        token_handler=token_handler,
        cookie_name=settings.security.cookie_name,
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health_router)
    app.include_router(accounts_router)
    app.include_router(games_router)
    app.include_router(users_router)
    app.include_router(admin_router)

    return app


def get_app() -> FastAPI:
    """Application factory used by uvicorn's `--factory` mode."""
    return create_app()
