"""Normalize raw feed trades into the canonical Trade shape.

Every raw-feed representation is resolved here, once, so the FIFO engine only
ever sees `Trade`.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from polymarket_pnl.constants import DEFAULT_OUTCOME, UNKNOWN_CONDITION_ID
from polymarket_pnl.exceptions import TradeNormalizationError
from polymarket_pnl.feed.models import RawTrade
from polymarket_pnl.portfolio.models import Trade, TradeSide

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger()


def _parse_number(value: object, *, field: str, raw_id: str | None) -> float:
    """Parse a feed number that may be missing, numeric, or a numeric string."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise TradeNormalizationError(f"{field} must be numeric (got {value!r})", raw_id)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise TradeNormalizationError(
            f"{field} must be numeric (got {value!r})", raw_id
        ) from None
    if not math.isfinite(number):
        raise TradeNormalizationError(f"{field} must be finite (got {value!r})", raw_id)
    return number


def normalize_trade(raw: RawTrade | Mapping[str, Any], user_address: str | None = None) -> Trade:
    """
    Resolve one raw feed trade into a `Trade`.

    Rules:
    - conditionId: `conditionId`/`condition_id`, `market.conditionId`, or the `tokenId`
      prefix; "unknown" when absent.
    - outcome: `outcome`, the `tokenId` suffix, or `asset.outcome`; "0" when absent.
    - side: SELL only when the raw side upper-cases to "SELL", else BUY.
    - notional: price x size.
    - id: `id`, else `hash`, else "{timestamp}-{user}-{size}".

    Args:
        raw: Raw trade (model or plain mapping from JSON).
        user_address: Wallet the trades belong to. Takes precedence over the
            record's own `user` field and feeds the fallback id.

    Returns:
        Validated Trade.

    Raises:
        TradeNormalizationError: If the record has no timestamp or carries
            non-numeric, non-finite, or negative numbers.
    """
    if not isinstance(raw, RawTrade):
        try:
            raw = RawTrade.model_validate(raw)
        except ValidationError as e:
            raise TradeNormalizationError(f"Malformed raw trade: {e}") from e

    raw_id = raw.id or raw.hash
    if raw.timestamp is None or raw.timestamp == "":
        raise TradeNormalizationError("Trade timestamp is missing", raw_id)

    price = _parse_number(raw.price, field="price", raw_id=raw_id)
    size = _parse_number(raw.size, field="size", raw_id=raw_id)
    fees = _parse_number(raw.fees, field="fees", raw_id=raw_id)

    side = TradeSide.SELL if (raw.side or "").upper() == "SELL" else TradeSide.BUY
    user = user_address or raw.user
    trade_id = raw_id or f"{raw.timestamp}-{user}-{size:g}"

    try:
        return Trade(
            id=trade_id,
            timestamp=raw.timestamp,
            user=user,
            condition_id=raw.resolved_condition_id or UNKNOWN_CONDITION_ID,
            outcome=raw.resolved_outcome or DEFAULT_OUTCOME,
            side=side,
            price=price,
            size=size,
            notional=price * size,
            fees=fees,
            event_title=raw.event_title,
            market_title=raw.market_title,
            outcome_name=raw.outcome_name,
            event_slug=raw.event_slug,
            slug=raw.slug,
            icon=raw.icon,
        )
    except ValidationError as e:
        raise TradeNormalizationError(f"Invalid trade: {e}", raw_id) from e


def normalize_trades(
    raws: Iterable[RawTrade | Mapping[str, Any]],
    user_address: str | None = None,
) -> tuple[list[Trade], int]:
    """
    Normalize a batch of raw trades, skipping the ones that cannot be normalized.

    Returns:
        (trades, rejected_count)
    """
    trades: list[Trade] = []
    rejected = 0
    for raw in raws:
        try:
            trades.append(normalize_trade(raw, user_address))
        except TradeNormalizationError as e:
            rejected += 1
            logger.warning("Skipping malformed trade", trade_id=e.raw_id, error=e.message)
    return trades, rejected
