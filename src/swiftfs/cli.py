"""
swiftfs CLI

Small command line over the stream session API:
- cat: Print an object's content
- put: Write a file (or stdin) to an object
- stat: Show synthesized stat metadata without downloading the object
- rm: Delete an object
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict, Optional

import typer

from .fileobj import open as swift_open
from .operations import run_and_exit
from .operations.printers import print_delete_summary, print_stat, print_write_summary
from .session import delete_object, stat_url
from .settings import ConfigResolver, Settings, create_settings_from_env
from .storage.base import SessionFactory
from .storage.errors import ResourceNotFound
from .storage.swift_http import SwiftSessionFactory
from .storage.uri import DEFAULT_SCHEME, parse_swift_uri

app = typer.Typer(name="swiftfs", help="File-style access to Swift object storage")

CHUNK_SIZE = 1024 * 1024  # 1 MiB


def _session_factory(settings: Settings) -> SessionFactory:
    """Session factory for CLI commands (replaced in tests)."""
    return SwiftSessionFactory.from_settings(settings)


def _options(token, storage_url, account, key, auth_url) -> Dict[str, str]:
    values = {
        "token": token,
        "swift_endpoint": storage_url,
        "account": account,
        "key": key,
        "endpoint": auth_url,
    }
    return {name: value for name, value in values.items() if value}


def _resolver(url: str, options: Dict[str, str], settings: Settings) -> ConfigResolver:
    scheme = parse_swift_uri(url).scheme or DEFAULT_SCHEME
    return ConfigResolver({scheme: options}, scheme=scheme, defaults=lambda: settings)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


TokenOpt = typer.Option(None, "--token", help="Pre-issued auth token")
StorageUrlOpt = typer.Option(None, "--storage-url", help="Storage URL to use with --token")
AccountOpt = typer.Option(None, "--account", help="Account name")
KeyOpt = typer.Option(None, "--key", help="Account key")
AuthUrlOpt = typer.Option(None, "--auth-url", help="Identity endpoint for account+key")
VerboseOpt = typer.Option(False, "--verbose", help="Enable debug logging")


@app.command()
def cat(
    url: str = typer.Argument(..., help="Object locator, e.g. swift://container/path"),
    token: Optional[str] = TokenOpt,
    storage_url: Optional[str] = StorageUrlOpt,
    account: Optional[str] = AccountOpt,
    key: Optional[str] = KeyOpt,
    auth_url: Optional[str] = AuthUrlOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Print an object's content to stdout."""
    _configure_logging(verbose)

    def _cat() -> None:
        settings = create_settings_from_env()
        options = _options(token, storage_url, account, key, auth_url)
        out = typer.get_binary_stream("stdout")
        with swift_open(url, "r", settings=settings, factory=_session_factory(settings), **options) as f:
            shutil.copyfileobj(f, out, CHUNK_SIZE)
        out.flush()

    run_and_exit(_cat)


@app.command()
def put(
    url: str = typer.Argument(..., help="Object locator, e.g. swift://container/path"),
    src: Optional[Path] = typer.Argument(None, help="Local file to upload (stdin if omitted)"),
    mode: str = typer.Option("w", "--mode", help="Open mode: w (replace), a (append), x (create only)"),
    token: Optional[str] = TokenOpt,
    storage_url: Optional[str] = StorageUrlOpt,
    account: Optional[str] = AccountOpt,
    key: Optional[str] = KeyOpt,
    auth_url: Optional[str] = AuthUrlOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Write a local file or stdin to an object."""
    _configure_logging(verbose)

    def _put() -> None:
        settings = create_settings_from_env()
        options = _options(token, storage_url, account, key, auth_url)
        data = src.read_bytes() if src is not None else typer.get_binary_stream("stdin").read()
        with swift_open(url, mode, settings=settings, factory=_session_factory(settings), **options) as f:
            f.write(data)
        print_write_summary(url, len(data))

    run_and_exit(_put)


@app.command()
def stat(
    url: str = typer.Argument(..., help="Object locator, e.g. swift://container/path"),
    token: Optional[str] = TokenOpt,
    storage_url: Optional[str] = StorageUrlOpt,
    account: Optional[str] = AccountOpt,
    key: Optional[str] = KeyOpt,
    auth_url: Optional[str] = AuthUrlOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Show object metadata without downloading it."""
    _configure_logging(verbose)

    def _stat() -> None:
        settings = create_settings_from_env()
        resolver = _resolver(url, _options(token, storage_url, account, key, auth_url), settings)
        result = stat_url(url, resolver=resolver, factory=_session_factory(settings))
        if result is None:
            raise ResourceNotFound(f"No such object: {url}")
        print_stat(url, result)

    run_and_exit(_stat)


@app.command()
def rm(
    url: str = typer.Argument(..., help="Object locator, e.g. swift://container/path"),
    token: Optional[str] = TokenOpt,
    storage_url: Optional[str] = StorageUrlOpt,
    account: Optional[str] = AccountOpt,
    key: Optional[str] = KeyOpt,
    auth_url: Optional[str] = AuthUrlOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Delete an object."""
    _configure_logging(verbose)

    def _rm() -> None:
        settings = create_settings_from_env()
        resolver = _resolver(url, _options(token, storage_url, account, key, auth_url), settings)
        delete_object(url, resolver=resolver, factory=_session_factory(settings))
        print_delete_summary(url)

    run_and_exit(_rm)


if __name__ == "__main__":
    app()
