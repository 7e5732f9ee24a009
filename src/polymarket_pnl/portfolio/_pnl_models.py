"""P&L bookkeeping models used internally by the FIFO engine.

These dataclasses never leave the engine:
- FIFO lot tracking (Lot)
- Result of matching one SELL against the lot queue (SellMatch)
- Per-position state owned by one engine instance (PositionBook)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from polymarket_pnl.portfolio.models import PositionKey, Trade


METADATA_FIELDS: tuple[str, ...] = (
    "event_title",
    "market_title",
    "outcome_name",
    "event_slug",
    "slug",
    "icon",
)


@dataclass
class Lot:
    """FIFO lot for tracking cost basis.

    Represents the shares acquired by one BUY. `unit_cost` includes the BUY's fees.
    """

    remaining_quantity: float
    unit_cost: float
    acquired_at: datetime


@dataclass(frozen=True)
class SellMatch:
    """Outcome of drawing one SELL down against a lot queue."""

    matched_quantity: float
    oversold_quantity: float
    cost_consumed: float


@dataclass
class PositionBook:
    """Lot queue plus running accounting totals for one position key."""

    key: PositionKey
    first_seen_at: datetime
    lots: deque[Lot] = field(default_factory=deque)
    first_lot_at: datetime | None = None
    last_trade_at: datetime | None = None
    trades_count: int = 0
    has_sell: bool = False
    sold_quantity: float = 0.0
    realized_pnl: float = 0.0
    cost_consumed: float = 0.0
    proceeds: float = 0.0
    oversold_quantity: float = 0.0
    closed_at: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def absorb_metadata(self, trade: Trade) -> None:
        """Keep the first non-empty value seen for each market metadata field."""
        for name in METADATA_FIELDS:
            value = getattr(trade, name)
            if value and name not in self.metadata:
                self.metadata[name] = value
