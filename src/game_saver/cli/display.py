"""Rich rendering helpers shared by CLI commands."""

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.table import Table


console = Console()


def format_remaining(seconds: int | None) -> str:
    """Render seconds as `2h 05m` / `4m 10s`."""
    if seconds is None:
        return "-"
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m {secs:02d}s"


def _format_time(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M UTC")
    return str(value)


def status_table(statuses: list[dict[str, Any]], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Account ID", style="cyan")
    table.add_column("Username")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Holder")
    table.add_column("Remaining")

    for status in statuses:
        state = (
            "[green]Available[/green]" if status.get("available") else "[red]In use[/red]"
        )
        table.add_row(
            status["id"],
            status.get("username", "-"),
            str(status.get("type", "-")),
            state,
            status.get("holder_id") or "-",
            format_remaining(status.get("time_remaining")),
        )
    return table


def account_table(accounts: list[dict[str, Any]], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Account ID", style="cyan")
    table.add_column("Game")
    table.add_column("Type")
    table.add_column("Username", style="green")
    table.add_column("Holder")
    table.add_column("Lease expires")

    for account in accounts:
        table.add_row(
            account["id"],
            account.get("game_id", "-"),
            str(account.get("type", "-")),
            account.get("username", "-"),
            account.get("lease_holder") or "-",
            _format_time(account.get("lease_expires_at")),
        )
    return table


def print_credentials(account: dict[str, Any]) -> None:
    """Show the login details of a freshly assigned account."""
    console.print(f"[bold]Username:[/bold] {account['username']}")
    console.print(f"[bold]Password:[/bold] {account['password']}")
    if account.get("guard_link"):
        console.print(f"[bold]Guard link:[/bold] {account['guard_link']}")
    if account.get("lease_expires_at"):
        console.print(
            f"[bold]Lease expires:[/bold] {_format_time(account['lease_expires_at'])}"
        )
