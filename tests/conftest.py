"""
Shared test fixtures.

PHILOSOPHY: Use REAL objects wherever possible.
- Real Pydantic models (not dicts pretending to be models)
- Real engine instances, one per test
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import pytest

from polymarket_pnl.portfolio import ClosedPosition, Trade, TradeSide

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


# ============================================================================
# Domain Object Builders (create REAL objects, not dicts)
# ============================================================================
@pytest.fixture
def make_trade() -> Callable[..., Trade]:
    """Factory for normalized trades; `day` offsets the timestamp from 2024-01-01."""
    counter = iter(range(1, 10_000))

    def _make(
        side: str,
        size: float,
        price: float,
        *,
        fees: float = 0.0,
        day: float = 0,
        condition_id: str = "condition1",
        outcome: str = "0",
        notional: float | None = None,
        **overrides: Any,
    ) -> Trade:
        return Trade(
            id=overrides.pop("id", f"trade-{next(counter)}"),
            timestamp=overrides.pop("timestamp", BASE_TIME + timedelta(days=day)),
            user="0x123",
            condition_id=condition_id,
            outcome=outcome,
            side=TradeSide(side),
            price=price,
            size=size,
            notional=price * size if notional is None else notional,
            fees=fees,
            **overrides,
        )

    return _make


@pytest.fixture
def make_position() -> Callable[..., ClosedPosition]:
    """Factory for closed-position records as the aggregator receives them."""

    def _make(
        realized_pnl: float,
        *,
        size: float = 100.0,
        opened_at: datetime = BASE_TIME,
        closed_at: datetime | None = None,
        condition_id: str = "condition1",
        outcome: str = "0",
        **overrides: Any,
    ) -> ClosedPosition:
        return ClosedPosition(
            condition_id=condition_id,
            outcome=outcome,
            size=size,
            realized_pnl=realized_pnl,
            opened_at=opened_at,
            closed_at=closed_at,
            **overrides,
        )

    return _make
