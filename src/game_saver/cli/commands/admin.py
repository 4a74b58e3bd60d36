"""Admin CLI commands operating directly on the configured database."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from game_saver.api.schemas import account_payload
from game_saver.auth import Role, SessionTokenHandler
from game_saver.cli.display import account_table
from game_saver.cli.helpers import load_settings
from game_saver.config.settings import Settings
from game_saver.db import AccountType, open_database
from game_saver.db.repositories import AccountRepository
from game_saver.exceptions import GameSaverError
from game_saver.leasing import LeaseService


console = Console()

app = typer.Typer(name="admin", help="Manage shared accounts on the local database")

T = TypeVar("T")


def _run(
    settings: Settings, action: Callable[[AccountRepository], Awaitable[T]]
) -> T:
    """Open the database, run `action` against the repository, then close it."""

    async def runner() -> T:
        database = await open_database(
            settings.database.path, echo=settings.database.echo
        )
        try:
            return await action(AccountRepository(database))
        finally:
            await database.dispose()

    try:
        return asyncio.run(runner())
    except GameSaverError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e


@app.command("create-account")
def create_account(
    game_id: Annotated[str, typer.Argument(help="Game the account belongs to")],
    username: Annotated[str, typer.Option("--username", "-u", help="Steam login")],
    password: Annotated[str, typer.Option("--password", "-p", help="Steam password")],
    type: Annotated[
        AccountType, typer.Option("--type", "-t", help="offline or online")
    ] = AccountType.OFFLINE,
    guard_link: Annotated[
        str | None, typer.Option("--guard-link", "-g", help="Steam Guard link")
    ] = None,
) -> None:
    """Register a shared account for a game."""
    settings = load_settings()
    account = _run(
        settings,
        lambda repo: repo.create(
            game_id=game_id,
            type=type,
            username=username,
            secret=password,
            guard_link=guard_link,
        ),
    )
    console.print(f"[green]Account created:[/green] {account.id} ({account.type.value})")


@app.command("list")
def list_accounts(
    type: Annotated[
        AccountType | None, typer.Option("--type", "-t", help="Filter by type")
    ] = None,
) -> None:
    """List every account, newest first."""
    settings = load_settings()
    accounts = _run(settings, lambda repo: repo.list_all(type=type))
    if not accounts:
        console.print("[yellow]No accounts found.[/yellow]")
        return
    console.print(
        account_table([account_payload(a) for a in accounts], title="Shared accounts")
    )


@app.command("delete")
def delete_account(
    account_id: Annotated[str, typer.Argument(help="Account to delete")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Skip confirmation")
    ] = False,
) -> None:
    """Delete an account, even if it is currently leased."""
    if not force:
        confirm = typer.confirm(f"Permanently delete account {account_id}?")
        if not confirm:
            console.print("Cancelled.")
            raise typer.Exit(0)

    settings = load_settings()
    if _run(settings, lambda repo: repo.delete(account_id)):
        console.print(f"[green]Account {account_id} deleted.[/green]")
    else:
        console.print(f"[red]Account {account_id} not found.[/red]")
        raise typer.Exit(1)


@app.command("sweep")
def sweep_expired() -> None:
    """Clear stored lease fields of expired leases."""
    settings = load_settings()
    cleared = _run(
        settings,
        lambda repo: LeaseService(
            repo,
            min_hours=settings.leasing.min_hours,
            max_hours=settings.leasing.max_hours,
        ).sweep_expired(),
    )
    console.print(f"Cleared {cleared} expired lease(s).")


@app.command("issue-token")
def issue_token(
    user_id: Annotated[str, typer.Argument(help="User the token identifies")],
    role: Annotated[Role, typer.Option("--role", "-r")] = Role.USER,
    days: Annotated[
        int | None, typer.Option("--days", "-d", help="Days until expiration")
    ] = None,
) -> None:
    """Print a session token for a user."""
    settings = load_settings()
    if settings.security.session_secret_generated:
        console.print(
            "[red]No session secret configured.[/red] "
            "Set SECURITY__SESSION_SECRET so the server accepts this token."
        )
        raise typer.Exit(1)

    handler = SessionTokenHandler(
        settings.security.session_secret or "",
        ttl_days=settings.security.session_ttl_days,
    )
    token = handler.issue(user_id, role=role, expires_days=days)
    console.print(token, soft_wrap=True)
