"""Raw trade feed models and normalization into the canonical Trade shape."""

from polymarket_pnl.feed.models import RawTrade
from polymarket_pnl.feed.normalize import normalize_trade, normalize_trades
from polymarket_pnl.portfolio.pnl import sort_trades

__all__ = [
    "RawTrade",
    "normalize_trade",
    "normalize_trades",
    "sort_trades",
]
