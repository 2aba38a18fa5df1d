"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

from .printers import print_error

T = TypeVar('T')

# Exit codes keyed by exception class name
EXIT_CODES = {
    "ValueError": 2,
    "NoCredentials": 2,
    "MissingChallenge": 3,
    "ParseError": 4,
    "MissingRequiredField": 4,
    "MalformedChallenge": 4,
    "TokenEndpointError": 5,
    "InvalidToken": 6,
    "LoginFailed": 7,
    "UnexpectedStatus": 8,
    "RegistryUnavailable": 9,
}

FALLBACK_EXIT_CODE = 1


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns exit codes:
    - 0: Success
    - 1: Unknown error
    - 2: Missing credentials or invalid configuration
    - 3: Registry issued no challenge (MissingChallenge)
    - 4: Challenge header could not be parsed
    - 5: Token endpoint rejected the request (TokenEndpointError)
    - 6: Token endpoint returned no usable token (InvalidToken)
    - 7: Credential obtained but registry still refused it (LoginFailed)
    - 8: Registry answered an unexpected status (UnexpectedStatus)
    - 9: Network failure (RegistryUnavailable)

    Args:
        exc: Exception to map

    Returns:
        Exit code, with 1 as fallback for unknown exceptions
    """
    return EXIT_CODES.get(type(exc).__name__, FALLBACK_EXIT_CODE)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit, printing the error first.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except Exception as e:
        print_error(e)
        raise typer.Exit(code=exit_code_for(e)) from e
