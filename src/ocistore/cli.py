"""
ocistore CLI

Operates an OCI-backed object store from the command line. The store location
is read from OCISTORE_LOCATION (see ``ocistore.settings``).

- create/open: write and read the store configuration
- put/get/list/delete: object operations scoped to a resource category
- ping/info: connectivity check and store description
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer

from .cli_context import CLIContext
from .operations import run_and_exit
from .storage.base import ByteRange
from .storage.keyspace import StorageResource

T = TypeVar("T")

app = typer.Typer(name="ocistore", help="OCI registry backed object store")


def _context() -> CLIContext:
    return CLIContext.from_env()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _with_context(func: Callable[[CLIContext], T]) -> T:
    """Run ``func`` against a fresh context, closing it afterwards."""
    def _run() -> T:
        context = _context()
        try:
            return func(context)
        finally:
            context.close()
    return run_and_exit(_run)


def _parse_key(key_hex: str) -> bytes:
    """
    Parse a hex-encoded 32-byte key.

    Raises:
        ValueError: If the key is not 64 hex characters
    """
    try:
        key = bytes.fromhex(key_hex.strip())
    except ValueError as e:
        raise ValueError(f"Invalid key {key_hex!r}: not hex") from e
    if len(key) != 32:
        raise ValueError(f"Invalid key {key_hex!r}: expected 32 bytes, got {len(key)}")
    return key


def _emit(chunks, output: Optional[Path]) -> None:
    if output is None:
        for chunk in chunks:
            typer.echo(chunk, nl=False)
        return
    with open(output, "wb") as f:
        for chunk in chunks:
            f.write(chunk)


@app.command()
def create(
    config_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Configuration file to store"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Initialize the store with a configuration blob."""
    _configure_logging(verbose)

    def _create(context: CLIContext) -> None:
        context.store.create(config_file.read_bytes())
        typer.echo(f"Created {context.store.location}")

    _with_context(_create)


@app.command("open")
def open_(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write configuration to file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Print the store configuration blob."""
    _configure_logging(verbose)

    def _open(context: CLIContext) -> None:
        _emit([context.store.open()], output)

    _with_context(_open)


@app.command()
def ping(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Check that the registry is reachable."""
    _configure_logging(verbose)

    def _ping(context: CLIContext) -> None:
        context.store.ping()
        typer.echo(f"OK {context.store.root}")

    _with_context(_ping)


@app.command()
def info(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Describe the configured store."""
    _configure_logging(verbose)

    def _info(context: CLIContext) -> None:
        store = context.store
        typer.echo(f"Location: {store.location}")
        typer.echo(f"Type: {store.type}")
        typer.echo(f"Registry: {store.root}")
        typer.echo(f"Repository: {store.origin}")
        typer.echo(f"Mode: {store.mode()}")

    _with_context(_info)


@app.command("list")
def list_(
    resource: StorageResource = typer.Argument(..., help="Resource category"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """List object keys stored under a resource category."""
    _configure_logging(verbose)

    def _list(context: CLIContext) -> None:
        for key in sorted(context.store.list(resource)):
            typer.echo(key.hex())

    _with_context(_list)


@app.command()
def put(
    resource: StorageResource = typer.Argument(..., help="Resource category"),
    key: str = typer.Argument(..., help="Object key (64 hex characters)"),
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to upload"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Upload a file as an object."""
    _configure_logging(verbose)

    def _put(context: CLIContext) -> None:
        object_key = _parse_key(key)
        with open(source, "rb") as f:
            size = context.store.put(resource, object_key, f)
        typer.echo(f"Stored {object_key.hex()} ({size} bytes)")

    _with_context(_put)


@app.command()
def get(
    resource: StorageResource = typer.Argument(..., help="Resource category"),
    key: str = typer.Argument(..., help="Object key (64 hex characters)"),
    offset: Optional[int] = typer.Option(None, "--offset", help="First byte to read"),
    length: Optional[int] = typer.Option(None, "--length", help="Number of bytes to read"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write object to file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Download an object, optionally a byte range of it."""
    _configure_logging(verbose)

    def _get(context: CLIContext) -> None:
        object_key = _parse_key(key)
        rng = None
        if offset is not None or length is not None:
            if length is None:
                raise ValueError("--length is required with --offset")
            rng = ByteRange(offset=offset or 0, length=length)
        with context.store.get(resource, object_key, rng) as reader:
            _emit(reader, output)

    _with_context(_get)


@app.command()
def delete(
    resource: StorageResource = typer.Argument(..., help="Resource category"),
    key: str = typer.Argument(..., help="Object key (64 hex characters)"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Delete an object."""
    _configure_logging(verbose)

    def _delete(context: CLIContext) -> None:
        object_key = _parse_key(key)
        context.store.delete(resource, object_key)
        typer.echo(f"Deleted {object_key.hex()}")

    _with_context(_delete)


if __name__ == "__main__":
    app()
