"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

EXIT_CODES = {
    "OciNotFound": 1,
    "ValueError": 2,
    "TypeError": 2,
    "OciConfigError": 2,
    "OciError": 3,
    "TransportError": 3,
    "UnsupportedOperation": 4,
}

# Unknown exceptions exit with the generic registry/network failure code
FALLBACK_EXIT_CODE = 3


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    The most specific class in the exception's hierarchy that has a mapping
    wins, so subclasses inherit their parent's code:
    - 0: Success
    - 1: Object, tag or blob not found (OciNotFound)
    - 2: Invalid configuration or arguments (OciConfigError, ValueError)
    - 3: Registry, protocol or network error (OciError, httpx.TransportError)
    - 4: Unsupported resource category (UnsupportedOperation)

    Args:
        exc: Exception to map

    Returns:
        Exit code, with 3 as fallback for unknown exceptions
    """
    for cls in type(exc).__mro__:
        code = EXIT_CODES.get(cls.__name__)
        if code is not None:
            return code
    return FALLBACK_EXIT_CODE


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit, after printing the error to stderr.

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
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
