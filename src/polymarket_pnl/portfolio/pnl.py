"""FIFO realized P&L engine for prediction-market positions.

The engine consumes normalized trades one at a time and keeps, per position key
(condition_id, outcome), a FIFO queue of unconsumed BUY lots plus running
accounting totals.

Fees are handled as:
    - Buy fees are included in the lot's unit cost ((notional + fees) / size).
    - Sell fees reduce proceeds directly (notional - fees).

Sells that exceed every tracked lot (missing buys from transfers, airdrops or
redemptions) are matched against a synthetic zero-cost lot: the oversold shares
realize their full proceeds as profit instead of aborting the computation.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from polymarket_pnl.constants import QUANTITY_EPSILON
from polymarket_pnl.portfolio._fifo import (
    consume_lots,
    open_cost,
    open_lot,
    open_quantity,
    side_label,
)
from polymarket_pnl.portfolio._pnl_models import PositionBook
from polymarket_pnl.portfolio.models import (
    ClosedPosition,
    PositionKey,
    Trade,
    TradeSide,
    format_position_key,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()


def _ratio(numerator: float, denominator: float) -> float | None:
    """Quotient, or None for a non-positive denominator or a non-finite result."""
    if denominator <= 0:
        return None
    value = numerator / denominator
    return value if math.isfinite(value) else None


def sort_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Return trades in ascending timestamp order (stable for equal timestamps)."""
    return sorted(trades, key=lambda t: t.timestamp)


class FifoPnLEngine:
    """Match SELLs against BUY lots in FIFO order and track realized P&L per position.

    Each instance owns its position table for its whole lifetime; independent
    instances share no state, so separate wallets can be computed in parallel.

    Trades for a given position key must arrive in non-decreasing timestamp
    order. The engine does not sort.
    """

    def __init__(self) -> None:
        self._books: dict[PositionKey, PositionBook] = {}

    def process_trade(self, trade: Trade) -> None:
        """Consume one trade and update its position's lots and accounting totals."""
        key = trade.position_key
        book = self._books.get(key)
        if book is None:
            book = PositionBook(key=key, first_seen_at=trade.timestamp)
            self._books[key] = book

        if book.last_trade_at is not None and trade.timestamp < book.last_trade_at:
            logger.warning(
                "Trade out of timestamp order for position",
                position=format_position_key(key),
                trade_id=trade.id,
                timestamp=trade.timestamp.isoformat(),
                previous=book.last_trade_at.isoformat(),
            )
        book.last_trade_at = trade.timestamp
        book.trades_count += 1
        book.absorb_metadata(trade)

        if trade.side is TradeSide.BUY:
            self._process_buy(book, trade)
        else:
            self._process_sell(book, trade)

    def _process_buy(self, book: PositionBook, trade: Trade) -> None:
        lot = open_lot(trade)
        if lot is None:
            logger.debug(
                "Skipping zero-size buy",
                position=format_position_key(book.key),
                trade_id=trade.id,
            )
            return

        if book.first_lot_at is None:
            book.first_lot_at = lot.acquired_at
        book.lots.append(lot)
        # A flat position reopens.
        book.closed_at = None

    def _process_sell(self, book: PositionBook, trade: Trade) -> None:
        if trade.size <= QUANTITY_EPSILON:
            logger.debug(
                "Skipping zero-size sell",
                position=format_position_key(book.key),
                trade_id=trade.id,
            )
            return

        match = consume_lots(book.lots, trade.size)
        proceeds = trade.notional - trade.fees

        if match.oversold_quantity > 0:
            logger.warning(
                "Sell exceeds open lots; excess treated as zero cost basis",
                position=format_position_key(book.key),
                trade_id=trade.id,
                excess=match.oversold_quantity,
            )

        book.has_sell = True
        book.sold_quantity += trade.size
        book.realized_pnl += proceeds - match.cost_consumed
        book.cost_consumed += match.cost_consumed
        book.proceeds += proceeds
        book.oversold_quantity += match.oversold_quantity
        book.closed_at = trade.timestamp if open_quantity(book.lots) == 0 else None

    def get_closed_positions(self) -> list[ClosedPosition]:
        """
        Build the accounting records for every position that has seen a SELL.

        Positions with only BUYs never appear. Records are fresh immutable values on
        every call; later trades do not change records already handed out.
        """
        return [self._build_record(book) for book in self._books.values() if book.has_sell]

    def reset(self) -> None:
        """Drop all lots and accounting state."""
        self._books.clear()

    @staticmethod
    def _build_record(book: PositionBook) -> ClosedPosition:
        condition_id, outcome = book.key
        size = book.sold_quantity
        open_qty = open_quantity(book.lots)
        cost = book.cost_consumed

        return ClosedPosition(
            condition_id=condition_id,
            outcome=outcome,
            side=side_label(outcome),
            size=size,
            realized_pnl=book.realized_pnl,
            realized_pnl_percent=_ratio(book.realized_pnl * 100, cost) or 0.0,
            entry_vwap=_ratio(cost, size) or 0.0,
            exit_vwap=_ratio(book.proceeds, size) or 0.0,
            opened_at=book.first_lot_at or book.first_seen_at,
            closed_at=book.closed_at,
            open_quantity_remaining=open_qty,
            avg_entry_price_open=_ratio(open_cost(book.lots), open_qty),
            oversold_quantity=book.oversold_quantity,
            trades_count=book.trades_count,
            **book.metadata,
        )


def compute_closed_positions(trades: Iterable[Trade]) -> list[ClosedPosition]:
    """
    Run one fresh engine over a trade history.

    Trades are sorted ascending by timestamp first, which satisfies the engine's
    per-position ordering precondition.
    """
    engine = FifoPnLEngine()
    for trade in sort_trades(trades):
        engine.process_trade(trade)
    return engine.get_closed_positions()
