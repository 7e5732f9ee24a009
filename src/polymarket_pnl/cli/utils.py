"""Shared utilities for CLI commands (console output, JSON input files)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from polymarket_pnl.exceptions import InputFileError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

T = TypeVar("T")

console = Console()


def run_interruptible(func: Callable[[], T]) -> T:
    """Run a command body.

    Centralizes Ctrl+C handling across CLI commands.

    Raises:
        typer.Exit: With code 130 on KeyboardInterrupt (standard SIGINT exit code).
    """
    try:
        return func()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(130) from None


def read_json_file(path: Path) -> Any:
    """Read a JSON file.

    Raises:
        InputFileError: If the file is missing, unreadable, or not valid JSON.
    """
    if not path.exists():
        raise InputFileError(path, "File not found")
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError:
        raise InputFileError(path, "File is not valid JSON") from None
    except OSError as e:
        raise InputFileError(path, f"Could not read file ({e.strerror})") from None


def load_record_list(path: Path, *, kind: str, list_key: str) -> list[dict[str, Any]]:
    """Load a JSON list of objects, either bare or wrapped as `{list_key: [...]}`.

    Raises:
        InputFileError: If the file does not hold a list of JSON objects.
    """
    raw = read_json_file(path)
    if isinstance(raw, dict) and isinstance(raw.get(list_key), list):
        raw = raw[list_key]
    if not isinstance(raw, list):
        raise InputFileError(
            path, f"{kind} file must contain a JSON list (or an object with '{list_key}: [...]')"
        )
    if not all(isinstance(item, dict) for item in raw):
        raise InputFileError(path, f"{kind} file entries must be JSON objects")
    return raw


def exit_with_error(message: str) -> typer.Exit:
    """Print a standardized error line and build the exit to raise."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def emit_json(payload: object) -> None:
    """Write machine-readable output to stdout without rich formatting."""
    typer.echo(json.dumps(payload, indent=2, default=str))
