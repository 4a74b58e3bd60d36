"""Entry point for the `game-saver` command."""

from typing import Annotated

import typer
from rich.console import Console

from game_saver._version import __version__
from game_saver.cli.commands import accounts, admin, serve
from game_saver.core.logging import setup_logging


console = Console()

app = typer.Typer(
    name="game-saver",
    help="Catalog of shared game accounts with time-boxed leasing",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"game-saver {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Game Saver command line."""
    # command output goes through rich; only problems are logged
    setup_logging(log_level_name="WARNING")


app.command(name="serve")(serve.serve)
app.add_typer(admin.app, name="admin")
app.add_typer(accounts.app, name="accounts")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
