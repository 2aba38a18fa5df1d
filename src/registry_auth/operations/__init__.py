"""
Operations layer for the registry-auth CLI.

Error-to-exit-code mapping and human-readable printers used by CLI commands.
"""
from .mappers import run_and_exit, exit_code_for, EXIT_CODES

__all__ = ["run_and_exit", "exit_code_for", "EXIT_CODES"]
