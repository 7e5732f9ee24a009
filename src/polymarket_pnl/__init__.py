"""
Polymarket P&L.

FIFO realized profit/loss and portfolio statistics for prediction-market trade history.
"""

__version__ = "0.1.0"

# Configure structlog once at import time (quiet by default).
from polymarket_pnl.logging import configure_structlog

configure_structlog()

from polymarket_pnl.portfolio import (  # noqa: E402
    ClosedPosition,
    FifoPnLEngine,
    PositionSummary,
    Trade,
    TradeSide,
    compute_closed_positions,
    summarize_positions,
)

__all__ = [
    "ClosedPosition",
    "FifoPnLEngine",
    "PositionSummary",
    "Trade",
    "TradeSide",
    "__version__",
    "compute_closed_positions",
    "summarize_positions",
]
