"""FIFO position accounting and portfolio P&L statistics."""

from polymarket_pnl.portfolio.annotations import (
    activity_annotations,
    annotate_positions,
    first_buy_times,
    merge_annotations,
    open_time_annotations,
    trade_counts,
)
from polymarket_pnl.portfolio.models import (
    ClosedPosition,
    PositionAnnotation,
    PositionKey,
    Trade,
    TradeSide,
    format_position_key,
    parse_position_key,
)
from polymarket_pnl.portfolio.pnl import FifoPnLEngine, compute_closed_positions, sort_trades
from polymarket_pnl.portfolio.summary import PositionSummary, summarize_positions, truncate_label

__all__ = [
    "ClosedPosition",
    "FifoPnLEngine",
    "PositionAnnotation",
    "PositionKey",
    "PositionSummary",
    "Trade",
    "TradeSide",
    "activity_annotations",
    "annotate_positions",
    "compute_closed_positions",
    "first_buy_times",
    "format_position_key",
    "merge_annotations",
    "open_time_annotations",
    "parse_position_key",
    "sort_trades",
    "summarize_positions",
    "trade_counts",
    "truncate_label",
]
