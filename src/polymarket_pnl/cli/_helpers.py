"""Shared rendering and input helpers for P&L CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError
from rich.table import Table

from polymarket_pnl.cli.utils import read_json_file
from polymarket_pnl.exceptions import InputFileError
from polymarket_pnl.portfolio import (
    PositionAnnotation,
    PositionKey,
    format_position_key,
    parse_position_key,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from polymarket_pnl.portfolio import ClosedPosition, PositionSummary


def format_signed_currency(amount: float) -> str:
    """Format a dollar amount as a signed currency string with color.

    Args:
        amount: Amount in dollars (can be positive, negative, or zero).

    Returns:
        Formatted string with color markup.
    """
    value = f"${abs(amount):,.2f}"
    if round(amount, 2) > 0:
        return f"[green]+{value}[/green]"
    if round(amount, 2) < 0:
        return f"[red]-{value}[/red]"
    return "$0.00"


def format_days(days: float) -> str:
    """Format a holding time in days; "-" when unknown."""
    if days <= 0:
        return "-"
    if days < 1:
        return f"{days * 24:.1f}h"
    return f"{days:.1f}d"


def build_summary_table(summary: PositionSummary) -> Table:
    table = Table(title="P&L Summary (FIFO, realized)", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Realized P&L:", format_signed_currency(summary.total_realized_pnl))
    table.add_row("Positions Closed:", str(summary.total_positions_closed))
    table.add_row("Win Rate:", f"{summary.winrate:.1f}%")
    table.add_row("Avg P&L / Position:", format_signed_currency(summary.avg_pnl_per_position))
    table.add_row("Biggest Win:", format_signed_currency(summary.biggest_win))
    table.add_row("Biggest Loss:", format_signed_currency(summary.biggest_loss))
    table.add_row("Avg Position Size:", f"{summary.avg_pos_size:,.2f} shares")
    table.add_row("Avg Holding Time:", format_days(summary.avg_holding_time))
    table.add_row("Top Category:", summary.most_used_category)
    table.add_row("Top Tags:", ", ".join(summary.top_tags) or summary.most_used_tag)
    return table


def build_positions_table(positions: Sequence[ClosedPosition], *, full: bool = False) -> Table:
    table = Table(title=f"Closed Positions ({len(positions)})", show_header=True)
    table.add_column("Market", style="cyan", no_wrap=not full)
    table.add_column("Side", style="magenta")
    table.add_column("Size", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("Realized", justify="right")
    table.add_column("Open Qty", justify="right")
    table.add_column("Closed", style="dim")

    ordered = sorted(positions, key=lambda p: p.realized_pnl, reverse=True)
    for pos in ordered:
        market = pos.market_title or pos.event_title or format_position_key(pos.position_key)
        if not full and len(market) > 40:
            market = market[:37] + "..."
        table.add_row(
            market,
            pos.side or "-",
            f"{pos.size:,.2f}",
            f"{pos.entry_vwap:.3f}",
            f"{pos.exit_vwap:.3f}",
            format_signed_currency(pos.realized_pnl),
            f"{pos.open_quantity_remaining:,.2f}" if pos.open_quantity_remaining else "-",
            pos.closed_at.strftime("%Y-%m-%d %H:%M") if pos.closed_at else "[yellow]open[/yellow]",
        )
    return table


def load_annotations(path: Path) -> dict[PositionKey, PositionAnnotation]:
    """Load `{"conditionId:outcome": {category, tags, openedAt, tradesCount}}` from JSON.

    Raises:
        InputFileError: If the file is not an object of valid annotations.
    """
    raw = read_json_file(path)
    if not isinstance(raw, dict):
        raise InputFileError(path, "Annotations file must contain a JSON object")

    annotations: dict[PositionKey, PositionAnnotation] = {}
    for key, value in raw.items():
        try:
            annotations[parse_position_key(key)] = PositionAnnotation.model_validate(value)
        except (ValueError, ValidationError) as e:
            raise InputFileError(path, f"Invalid annotation for {key!r} ({e})") from None
    return annotations
