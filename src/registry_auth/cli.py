"""
Registry Auth CLI

Implements 3 CLI verbs:
- login: Negotiate credentials with a registry and report the result
- check: Report whether the registry currently grants access
- parse-challenge: Parse a WWW-Authenticate header value
"""
from __future__ import annotations

import logging
from typing import List, Optional

import typer

from .challenge import parse_www_authenticate
from .cli_context import CLIContext
from .operations import run_and_exit
from .operations.printers import print_access_status, print_challenge, print_login_summary

app = typer.Typer(name="registry-auth", help="Container registry authentication CLI")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def login(
    registry: Optional[str] = typer.Option(None, "--registry", help="Registry host[:port] or URL (default: $REGISTRY_AUTH_URL)"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Registry username (default: $REGISTRY_AUTH_USERNAME)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Registry password (default: $REGISTRY_AUTH_PASSWORD)"),
    scope: Optional[List[str]] = typer.Option(None, "--scope", help="Scope to request, e.g. repository:app:pull (repeatable)"),
    insecure: Optional[bool] = typer.Option(None, "--insecure", help="Use plain HTTP and skip TLS verification"),
    verbose: bool = typer.Option(False, "--verbose", help="Show detailed output")
) -> None:
    """Authenticate against a registry."""
    _configure_logging(verbose)

    def _login() -> None:
        context = CLIContext.from_options(
            registry_url=registry,
            registry_user=username,
            registry_pass=password,
            registry_insecure=insecure,
        )
        with context.client as client:
            client.authenticate(scope or [])
            print_login_summary(client.base_url, client.auth, verbose=verbose)

    run_and_exit(_login)


@app.command()
def check(
    registry: Optional[str] = typer.Option(None, "--registry", help="Registry host[:port] or URL (default: $REGISTRY_AUTH_URL)"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Registry username (default: $REGISTRY_AUTH_USERNAME)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Registry password (default: $REGISTRY_AUTH_PASSWORD)"),
    login_first: bool = typer.Option(False, "--login", help="Authenticate before checking access"),
    scope: Optional[List[str]] = typer.Option(None, "--scope", help="Scope to request when --login is given (repeatable)"),
    insecure: Optional[bool] = typer.Option(None, "--insecure", help="Use plain HTTP and skip TLS verification"),
    verbose: bool = typer.Option(False, "--verbose", help="Show detailed output")
) -> None:
    """Report whether the registry grants access."""
    _configure_logging(verbose)

    def _check() -> None:
        context = CLIContext.from_options(
            registry_url=registry,
            registry_user=username,
            registry_pass=password,
            registry_insecure=insecure,
        )
        with context.client as client:
            if login_first:
                client.authenticate(scope or [])
            print_access_status(client.base_url, client.is_authenticated())

    run_and_exit(_check)


@app.command("parse-challenge")
def parse_challenge(
    header: str = typer.Argument(..., help="WWW-Authenticate header value"),
) -> None:
    """Parse a WWW-Authenticate header value."""
    run_and_exit(lambda: print_challenge(parse_www_authenticate(header)))


if __name__ == "__main__":
    app()
