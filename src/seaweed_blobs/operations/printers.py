"""
Human-readable output formatting.

Centralizes all CLI output so commands stay thin. Results go to stdout,
errors to stderr.
"""
from __future__ import annotations

from typing import Mapping, Optional

from rich.console import Console
from rich.table import Table

from ..errors import SeaweedError
from ..handles import StorageHandle

_console = Console()
_err_console = Console(stderr=True)


def print_assignment(handle: StorageHandle, extension: Optional[str] = None, verbose: bool = False) -> None:
    """
    Print a fresh assignment.
    
    Shows the opaque filename and the volume server address callers need
    to upload to it.
    """
    _console.print(f"[bold]Filename:[/] {handle.filename_with_extension(extension)}")
    _console.print(f"[bold]Volume:[/] {handle.url}")
    if verbose:
        _console.print(f"[bold]Volume id:[/] [dim]{handle.volume_id}[/]")


def print_upload_summary(handle: StorageHandle, size: int, extension: Optional[str] = None) -> None:
    """Print the result of a successful upload."""
    _console.print(
        f"Uploaded {_format_bytes(size)} as [bold]{handle.filename_with_extension(extension)}[/] to {handle.url}"
    )


def print_headers(headers: Mapping[str, str]) -> None:
    """Print volume server response headers as a table (to stderr)."""
    table = Table(title="Response headers")
    table.add_column("Header", style="cyan")
    table.add_column("Value", style="yellow")
    for name, value in sorted(headers.items()):
        table.add_row(name, value)
    _err_console.print(table)


def print_error(exc: BaseException) -> None:
    """Print an error with its kind to stderr."""
    if isinstance(exc, SeaweedError):
        _err_console.print(f"[red]Error ({exc.kind.value}):[/] {exc}")
    else:
        _err_console.print(f"[red]Error:[/] {exc}")


def _format_bytes(size: int) -> str:
    """Format byte count in human-readable format."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024:
            if unit == 'B':
                return f"{size} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"
