"""P&L summary command - statistics over closed-position records."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer
from pydantic import ValidationError

from polymarket_pnl.cli._helpers import build_summary_table
from polymarket_pnl.cli.utils import (
    console,
    emit_json,
    exit_with_error,
    load_record_list,
    run_interruptible,
)
from polymarket_pnl.exceptions import InputFileError


def pnl_summary(
    positions_path: Annotated[
        Path,
        typer.Argument(
            help="JSON file with closed positions (a list, or an object with 'positions')."
        ),
    ],
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Summarize closed-position records (e.g. exported from the closed-positions feed)."""
    from polymarket_pnl.portfolio import ClosedPosition, summarize_positions

    try:
        raw_positions = load_record_list(positions_path, kind="Positions", list_key="positions")
    except InputFileError as e:
        raise exit_with_error(str(e)) from None

    try:
        positions = [ClosedPosition.model_validate(raw) for raw in raw_positions]
    except ValidationError as e:
        raise exit_with_error(f"Invalid closed position in {positions_path}: {e}") from None

    summary = run_interruptible(lambda: summarize_positions(positions))

    if output_json:
        emit_json(summary.model_dump(mode="json", by_alias=True))
        return

    console.print(build_summary_table(summary))
