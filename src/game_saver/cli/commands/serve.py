"""Run the Game Saver API server."""

from typing import Annotated

import typer
import uvicorn
from rich.console import Console

from game_saver.cli.helpers import load_settings
from game_saver.core.logging import setup_logging


console = Console()


def serve(
    host: Annotated[
        str | None, typer.Option("--host", help="Interface to bind")
    ] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port")] = None,
    reload: Annotated[
        bool | None, typer.Option("--reload/--no-reload", help="Auto-reload")
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level")
    ] = None,
) -> None:
    """Start the HTTP API.

    Options override the `server` settings section.
    """
    settings = load_settings()
    server = settings.server

    host = host or server.host
    port = port or server.port
    reload = server.reload if reload is None else reload
    level = (log_level or server.log_level).upper()
    setup_logging(
        json_logs=server.json_logs, log_level_name=level, log_file=server.log_file
    )

    console.print(f"Serving Game Saver on http://{host}:{port}")
    uvicorn.run(
        "game_saver.api.app:get_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=level.lower(),
        log_config=None,
    )
