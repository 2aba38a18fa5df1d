"""
Human-readable output formatting.

Centralizes all CLI output formatting so commands stay thin and focused.
"""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..challenge import BearerChallenge, Challenge
from ..credentials import BasicAuth, BearerAuth, Credential

_console = Console(soft_wrap=True)
_err_console = Console(stderr=True, soft_wrap=True)


def print_login_summary(registry: str, auth: Credential, verbose: bool = False) -> None:
    """
    Print the outcome of a successful login.

    Never prints a full token or password.

    Args:
        registry: Registry base URL
        auth: Credential adopted by the client
        verbose: Show token metadata
    """
    _console.print(f"[bold]Login succeeded:[/] {escape(registry)}")

    if isinstance(auth, BearerAuth):
        _console.print("[bold]Scheme:[/] Bearer")
        _console.print(f"[bold]Token:[/] {escape(auth.masked_token)}")
        if verbose:
            if auth.expires_in is not None:
                _console.print(f"[bold]Expires in:[/] {auth.expires_in}s")
            if auth.issued_at:
                _console.print(f"[bold]Issued at:[/] {escape(auth.issued_at)}")
    elif isinstance(auth, BasicAuth):
        _console.print("[bold]Scheme:[/] Basic")
        _console.print(f"[bold]User:[/] {escape(auth.user)}")


def print_access_status(registry: str, authenticated: bool) -> None:
    """Print whether the registry grants access."""
    state = "[green]yes[/]" if authenticated else "[red]no[/]"
    _console.print(f"[bold]Registry:[/] {escape(registry)}")
    _console.print(f"[bold]Access:[/] {state}")


def print_challenge(challenge: Challenge) -> None:
    """Print a parsed challenge as a table."""
    table = Table(title="Challenge")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="yellow")

    if isinstance(challenge, BearerChallenge):
        table.add_row("scheme", "Bearer")
        table.add_row("realm", escape(challenge.realm))
        table.add_row("service", escape(challenge.service or "-"))
        table.add_row("scope", escape(challenge.scope or "-"))
    else:
        table.add_row("scheme", "Basic")
        table.add_row("realm", escape(challenge.realm))

    _console.print(table)


def print_error(exc: BaseException) -> None:
    """Print an error to stderr."""
    _err_console.print(f"[bold red]Error:[/] {escape(str(exc))}")
