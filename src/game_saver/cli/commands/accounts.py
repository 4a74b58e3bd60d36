"""Lease commands that talk to a running Game Saver server."""

from collections.abc import Callable
from typing import Annotated, TypeVar

import jwt
import typer
from rich.console import Console

from game_saver.cli.display import (
    account_table,
    format_remaining,
    print_credentials,
    status_table,
)
from game_saver.cli.helpers import load_settings
from game_saver.client import GameSaverClient
from game_saver.exceptions import GameSaverError, LeaseConflictError


console = Console()

app = typer.Typer(name="accounts", help="Browse, lease and release shared accounts")

T = TypeVar("T")

ServerOption = Annotated[
    str | None,
    typer.Option("--server", "-s", envvar="GAME_SAVER_SERVER", help="Server URL"),
]
TokenOption = Annotated[
    str | None,
    typer.Option("--token", envvar="GAME_SAVER_TOKEN", help="Session token"),
]


def get_client(server: str | None, token: str | None) -> GameSaverClient:
    """Build a client from options, falling back to the `client` settings."""
    settings = load_settings()
    return GameSaverClient(
        server or settings.client.server_url,
        token or settings.client.token,
        timeout=settings.client.timeout_seconds,
    )


def _call(client: GameSaverClient, action: Callable[[GameSaverClient], T]) -> T:
    """Run one API call, turning API errors into a message and exit code 1."""
    try:
        with client:
            return action(client)
    except LeaseConflictError as e:
        console.print(
            f"[red]{e.message}[/red] "
            f"(free again in {format_remaining(e.time_remaining)})"
        )
        raise typer.Exit(1) from e
    except GameSaverError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e


def _token_subject(token: str | None) -> str:
    """User id carried by a session token (signature is checked by the server)."""
    if not token:
        console.print("[red]A session token is required.[/red]")
        raise typer.Exit(1)
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        console.print("[red]Malformed session token.[/red]")
        raise typer.Exit(1) from e
    return str(payload.get("sub", ""))


@app.command("list")
def list_accounts(
    game_id: Annotated[str, typer.Argument(help="Game to list accounts for")],
    server: ServerOption = None,
    token: TokenOption = None,
) -> None:
    """Show every shared account of a game and whether it is free."""
    statuses = _call(
        get_client(server, token), lambda c: c.list_game_accounts(game_id)
    )
    if not statuses:
        console.print("[yellow]No accounts for this game.[/yellow]")
        return
    available = sum(1 for s in statuses if s.get("available"))
    console.print(
        status_table(
            statuses, title=f"{len(statuses)} accounts, {available} available"
        )
    )


@app.command("status")
def account_status(
    account_id: Annotated[str, typer.Argument()],
    server: ServerOption = None,
    token: TokenOption = None,
) -> None:
    """Show whether one account is free."""
    status = _call(get_client(server, token), lambda c: c.status(account_id))
    console.print(status_table([status], title="Account status"))


@app.command("assign")
def assign_account(
    account_id: Annotated[str, typer.Argument()],
    hours: Annotated[int, typer.Option("--hours", "-h", help="Lease length")] = 1,
    server: ServerOption = None,
    token: TokenOption = None,
) -> None:
    """Lease an online account and print its credentials."""
    account = _call(get_client(server, token), lambda c: c.assign(account_id, hours))
    console.print(f"[green]Account assigned for {hours} hour(s).[/green]")
    print_credentials(account)


@app.command("release")
def release_account(
    account_id: Annotated[str, typer.Argument()],
    server: ServerOption = None,
    token: TokenOption = None,
) -> None:
    """Hand an online account back before the lease runs out."""
    _call(get_client(server, token), lambda c: c.release(account_id))
    console.print(f"[green]Account {account_id} released.[/green]")


@app.command("mine")
def my_accounts(
    server: ServerOption = None,
    token: TokenOption = None,
) -> None:
    """List the online accounts you currently hold."""
    client = get_client(server, token)
    user_id = _token_subject(token or load_settings().client.token)
    accounts = _call(client, lambda c: c.active_accounts(user_id))
    if not accounts:
        console.print("[yellow]You are not holding any accounts.[/yellow]")
        return
    console.print(account_table(accounts, title="Your leased accounts"))
