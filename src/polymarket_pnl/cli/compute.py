"""P&L compute command - FIFO realized P&L from a trade history file."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import TYPE_CHECKING, Annotated, Any

import structlog
import typer

from polymarket_pnl.cli._helpers import (
    build_positions_table,
    build_summary_table,
    load_annotations,
)
from polymarket_pnl.cli.utils import (
    console,
    emit_json,
    exit_with_error,
    load_record_list,
    run_interruptible,
)
from polymarket_pnl.exceptions import InputFileError

if TYPE_CHECKING:
    from polymarket_pnl.portfolio import (
        ClosedPosition,
        PositionAnnotation,
        PositionKey,
        PositionSummary,
        Trade,
    )

logger = structlog.get_logger()


def _compute_report(
    raw_trades: list[dict[str, Any]],
    *,
    user: str | None,
    raw_activity: list[dict[str, Any]] | None,
    file_annotations: dict[PositionKey, PositionAnnotation],
) -> tuple[list[Trade], int, list[ClosedPosition], PositionSummary]:
    from polymarket_pnl.feed import normalize_trades
    from polymarket_pnl.portfolio import (
        activity_annotations,
        annotate_positions,
        compute_closed_positions,
        merge_annotations,
        summarize_positions,
    )

    trades, rejected = normalize_trades(raw_trades, user_address=user)
    logger.info("Normalized trades", accepted=len(trades), rejected=rejected)

    positions = compute_closed_positions(trades)

    derived: dict[PositionKey, PositionAnnotation] = {}
    if raw_activity is not None:
        activity, activity_rejected = normalize_trades(raw_activity, user_address=user)
        logger.info(
            "Normalized activity history",
            accepted=len(activity),
            rejected=activity_rejected,
        )
        derived = activity_annotations(activity)

    # File annotations override anything derived from the activity history.
    annotations = merge_annotations(derived, file_annotations)
    if annotations:
        positions = annotate_positions(positions, annotations)
    return trades, rejected, positions, summarize_positions(positions)


def pnl_compute(
    trades_path: Annotated[
        Path,
        typer.Argument(help="JSON file with raw trades (a list, or an object with 'trades')."),
    ],
    user: Annotated[
        str | None,
        typer.Option(
            "--user",
            "-u",
            envvar="POLYMARKET_PNL_USER",
            help="Wallet address the trades belong to.",
            show_default=False,
        ),
    ] = None,
    annotations_path: Annotated[
        Path | None,
        typer.Option(
            "--annotations",
            "-a",
            help="JSON object mapping 'conditionId:outcome' to category/tags/openedAt.",
        ),
    ] = None,
    activity_path: Annotated[
        Path | None,
        typer.Option(
            "--activity",
            help=(
                "JSON file with the full raw trade activity; corrects open times "
                "(first BUY) and trade counts."
            ),
        ),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    show_positions: Annotated[
        bool,
        typer.Option("--positions/--no-positions", help="Show the closed positions table."),
    ] = True,
    full: Annotated[
        bool,
        typer.Option("--full", "-F", help="Show full market titles without truncation."),
    ] = False,
) -> None:
    """Compute FIFO realized P&L and summary statistics from trade history."""
    try:
        raw_trades = load_record_list(trades_path, kind="Trades", list_key="trades")
        raw_activity = (
            load_record_list(activity_path, kind="Activity", list_key="trades")
            if activity_path
            else None
        )
        file_annotations = load_annotations(annotations_path) if annotations_path else {}
    except InputFileError as e:
        raise exit_with_error(str(e)) from None

    trades, rejected, positions, summary = run_interruptible(
        lambda: _compute_report(
            raw_trades,
            user=user,
            raw_activity=raw_activity,
            file_annotations=file_annotations,
        )
    )

    if output_json:
        emit_json(
            {
                "positions": [pos.model_dump(mode="json", by_alias=True) for pos in positions],
                "summary": summary.model_dump(mode="json", by_alias=True),
                "tradesCount": len(trades),
                "rejectedTrades": rejected,
            }
        )
        return

    if rejected:
        console.print(f"[yellow]Skipped {rejected} malformed trade(s).[/yellow]")
    if not positions:
        console.print("[yellow]No closed positions found[/yellow]")

    output_console = console if not full else console.__class__(width=200)
    output_console.print(build_summary_table(summary))
    if positions and show_positions:
        output_console.print(build_positions_table(positions, full=full))

    oversold = sum(pos.oversold_quantity for pos in positions)
    if oversold:
        console.print(
            f"[yellow]Note:[/yellow] {oversold:,.2f} shares were sold without matching buys; "
            "trade history is likely incomplete and their proceeds count as profit."
        )
