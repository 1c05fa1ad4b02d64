"""
Human-readable output formatting for the CLI.
"""
from __future__ import annotations

import stat as stat_module
from datetime import datetime, timezone

import typer

from ..metadata import StatResult


def print_stat(url: str, result: StatResult) -> None:
    """
    Print a stat record.

    Args:
        url: Locator that was stated
        result: Synthesized stat record
    """
    modified = datetime.fromtimestamp(result.mtime, tz=timezone.utc).isoformat() if result.mtime else "never"
    typer.echo(f"File: {url}")
    typer.echo(f"Size: {_format_bytes(result.size)} ({result.size} bytes)")
    typer.echo(f"Mode: {oct(result.mode)} ({stat_module.filemode(result.mode)})")
    typer.echo(f"Owner: uid={result.uid} gid={result.gid}")
    typer.echo(f"Modified: {modified}")


def print_write_summary(url: str, size: int) -> None:
    typer.echo(f"Wrote {_format_bytes(size)} to {url}")


def print_delete_summary(url: str) -> None:
    typer.echo(f"Deleted {url}")


def _format_bytes(size_bytes: int) -> str:
    """
    Format byte count as human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "42 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
