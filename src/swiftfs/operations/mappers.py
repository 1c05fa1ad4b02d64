"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and a CLI command
wrapper so every Typer command handles errors the same way.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

import typer

T = TypeVar('T')

logger = logging.getLogger(__name__)

EXIT_CODES = {
    "ResourceNotFound": 1,
    "MissingResourceIdentifier": 2,
    "InvalidResourceIdentifier": 2,
    "ValueError": 2,
    "TransportError": 3,
    "AuthenticationError": 4,
    "ResourceConflict": 5,
}


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns:
    - 1: Object or container not found (ResourceNotFound)
    - 2: Bad locator or argument (MissingResourceIdentifier,
      InvalidResourceIdentifier, ValueError)
    - 3: Transport error or unknown error
    - 4: Authentication error (AuthenticationError)
    - 5: Exclusive create conflict (ResourceConflict)

    Args:
        exc: Exception to map

    Returns:
        Exit code (1-5, with 3 as fallback for unknown exceptions)
    """
    return EXIT_CODES.get(type(exc).__name__, 3)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exception to an exit code
    via typer.Exit, printing the message to stderr.

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
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
