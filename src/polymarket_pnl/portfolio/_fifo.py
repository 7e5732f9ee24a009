"""FIFO (First-In-First-Out) lot matching primitives.

This module handles lot creation from BUY trades and drawing SELL quantity down
against a position's lot queue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from polymarket_pnl.constants import QUANTITY_EPSILON, YES_OUTCOME_MARKERS
from polymarket_pnl.portfolio._pnl_models import Lot, SellMatch

if TYPE_CHECKING:
    from collections import deque
    from collections.abc import Iterable

    from polymarket_pnl.portfolio.models import Trade


def open_lot(trade: Trade) -> Lot | None:
    """
    Build the lot acquired by a BUY trade.

    The unit cost carries the full acquisition cost, fees included:
    `(notional + fees) / size`.

    Returns:
        The new lot, or None for a zero-size BUY (nothing to track).
    """
    if trade.size <= QUANTITY_EPSILON:
        return None
    return Lot(
        remaining_quantity=trade.size,
        unit_cost=(trade.notional + trade.fees) / trade.size,
        acquired_at=trade.timestamp,
    )


def consume_lots(lots: deque[Lot], quantity: float) -> SellMatch:
    """
    Draw `quantity` shares down against `lots`, oldest lot first.

    Lots are mutated in place and removed once exhausted. Quantity left over after
    the queue empties is oversold: it is matched against a synthetic zero-cost lot,
    so it contributes nothing to `cost_consumed`.

    Args:
        lots: The position's live lot queue (mutated).
        quantity: SELL size to match.

    Returns:
        SellMatch with matched and oversold quantities and the FIFO cost consumed.
    """
    remaining_to_sell = quantity
    matched_qty = 0.0
    cost_consumed = 0.0

    while remaining_to_sell > QUANTITY_EPSILON and lots:
        lot = lots[0]
        consume_qty = min(lot.remaining_quantity, remaining_to_sell)
        matched_qty += consume_qty
        cost_consumed += consume_qty * lot.unit_cost

        lot.remaining_quantity -= consume_qty
        remaining_to_sell -= consume_qty

        if lot.remaining_quantity <= QUANTITY_EPSILON:
            lots.popleft()

    oversold_qty = remaining_to_sell if remaining_to_sell > QUANTITY_EPSILON else 0.0
    return SellMatch(
        matched_quantity=matched_qty,
        oversold_quantity=oversold_qty,
        cost_consumed=cost_consumed,
    )


def open_quantity(lots: Iterable[Lot]) -> float:
    """Sum of remaining quantity across a lot queue, with float dust snapped to zero."""
    total = sum(lot.remaining_quantity for lot in lots)
    return total if total > QUANTITY_EPSILON else 0.0


def open_cost(lots: Iterable[Lot]) -> float:
    """Remaining cost basis across a lot queue."""
    return sum(lot.remaining_quantity * lot.unit_cost for lot in lots)


def side_label(outcome: str) -> Literal["Long YES", "Long NO"]:
    """
    Label a position by its outcome.

    Heuristic: outcomes containing "yes" or "true" (or exactly "1") are Long YES;
    everything else is Long NO.
    """
    lower = outcome.lower()
    if lower == "1" or any(marker in lower for marker in YES_OUTCOME_MARKERS):
        return "Long YES"
    return "Long NO"
