"""
SeaweedFS blobs CLI

Thin command wrappers over SeaweedClient:
- assign: Reserve a file id and print its opaque filename
- put: Assign and upload a local file in one step
- upload: Upload a local file to an existing assignment
- get: Fetch a blob by opaque filename
- delete: Delete a blob by opaque filename
- locate: Print the volume server URL a blob would be read from
- decode: Print the internal file id behind an opaque filename (hidden, operator debugging only)
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .cli_context import CLIContext
from .handles import decode_filename
from .operations import run_and_exit
from .operations.printers import print_assignment, print_headers, print_upload_summary

app = typer.Typer(name="seaweed-blobs", help="SeaweedFS blobs CLI")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output and debug logs"),
) -> None:
    """Store, fetch and delete blobs in a SeaweedFS cluster."""
    ctx.obj = {"verbose": verbose}
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _with_context(func):
    """Run func(context) with a fresh CLIContext, closing it afterwards."""
    def _run():
        context = CLIContext.from_env()
        try:
            return func(context)
        finally:
            context.close()
    return run_and_exit(_run)


@app.command()
def assign(
    ctx: typer.Context,
    replication: Optional[str] = typer.Option(None, "--replication", help="Replication placement, e.g. 001"),
    ttl: Optional[str] = typer.Option(None, "--ttl", help="Expiry, e.g. 3d"),
) -> None:
    """Reserve a file id and print its opaque filename."""
    
    def _assign(context: CLIContext) -> None:
        handle = context.client.allocate(replication=replication, ttl=ttl)
        print_assignment(handle, verbose=ctx.obj["verbose"])
    
    _with_context(_assign)


@app.command()
def put(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload"),
    replication: Optional[str] = typer.Option(None, "--replication", help="Replication placement, e.g. 001"),
    ttl: Optional[str] = typer.Option(None, "--ttl", help="Expiry, e.g. 3d"),
    extension: Optional[str] = typer.Option(None, "--extension", help="Extension hint appended to the filename"),
) -> None:
    """Assign a file id and upload a local file to it."""
    
    def _put(context: CLIContext) -> None:
        client = context.client
        handle = client.allocate(replication=replication, ttl=ttl)
        with path.open("rb") as f:
            client.upload(handle, f, ttl=ttl)
        print_upload_summary(handle, path.stat().st_size, extension=extension)
    
    _with_context(_put)


@app.command()
def upload(
    filename: str = typer.Argument(..., help="Opaque filename from a previous assign"),
    url: str = typer.Argument(..., help="Volume server host:port from the same assign"),
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload"),
    ttl: Optional[str] = typer.Option(None, "--ttl", help="Expiry, e.g. 3d"),
) -> None:
    """Upload a local file to an existing assignment."""
    
    def _upload(context: CLIContext) -> None:
        client = context.client
        handle = client.handle_from_parts(url, filename)
        with path.open("rb") as f:
            client.upload(handle, f, ttl=ttl)
        print_upload_summary(handle, path.stat().st_size)
    
    _with_context(_upload)


@app.command()
def get(
    ctx: typer.Context,
    filename: str = typer.Argument(..., help="Opaque filename"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
) -> None:
    """Fetch a blob by opaque filename."""
    
    def _get(context: CLIContext) -> None:
        if output is not None:
            with output.open("wb") as f:
                headers = context.client.fetch(filename, f)
        else:
            headers = context.client.fetch(filename, sys.stdout.buffer)
            sys.stdout.buffer.flush()
        if ctx.obj["verbose"]:
            print_headers(headers)
    
    _with_context(_get)


@app.command()
def delete(
    filename: str = typer.Argument(..., help="Opaque filename"),
) -> None:
    """Delete a blob by opaque filename."""
    
    def _delete(context: CLIContext) -> None:
        context.client.delete(filename)
        typer.echo(f"Deleted {filename}")
    
    _with_context(_delete)


@app.command()
def locate(
    filename: str = typer.Argument(..., help="Opaque filename"),
) -> None:
    """Print the volume server URL a blob would be read from."""
    
    def _locate(context: CLIContext) -> None:
        typer.echo(context.client.locate_url(filename))
    
    _with_context(_locate)


@app.command(hidden=True)
def decode(
    filename: str = typer.Argument(..., help="Opaque filename"),
) -> None:
    """
    Print the internal file id behind an opaque filename.
    
    Operator debugging aid for correlating a filename with cluster logs.
    Hidden from help since file ids are not meant for external callers.
    """
    
    def _decode() -> None:
        typer.echo(decode_filename(filename).decode("utf-8", errors="replace"))
    
    run_and_exit(_decode)


if __name__ == "__main__":
    app()
