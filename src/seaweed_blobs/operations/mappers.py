"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

from ..errors import ErrorKind, SeaweedError

T = TypeVar('T')

EXIT_CODES = {
    ErrorKind.NOT_FOUND: 1,
    ErrorKind.DECODE: 2,
    ErrorKind.REQUEST: 3,
    ErrorKind.CONFIG: 4,
}

# Exit code for validation errors raised outside the client (bad CLI input)
VALIDATION_EXIT_CODE = 2

# Exit code for anything unexpected
FALLBACK_EXIT_CODE = 3


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.
    
    - 0: Success
    - 1: Content not found (NotFound)
    - 2: Malformed filename or response (DecodeError), or bad input (ValueError)
    - 3: Cluster or network fault (RequestError) or unknown error
    - 4: Missing or invalid configuration (ConfigError)
    
    Args:
        exc: Exception to map
        
    Returns:
        Exit code, with 3 as fallback for unknown exceptions
    """
    if isinstance(exc, SeaweedError):
        return EXIT_CODES.get(exc.kind, FALLBACK_EXIT_CODE)
    if isinstance(exc, ValueError):
        return VALIDATION_EXIT_CODE
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
        from .printers import print_error
        print_error(e)
        raise typer.Exit(code=exit_code_for(e)) from e
