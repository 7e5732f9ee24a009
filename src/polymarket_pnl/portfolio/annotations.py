"""Attach caller-sourced annotations (category, tags, open times, trade counts) to records."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from polymarket_pnl.portfolio.models import PositionAnnotation, TradeSide

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import datetime

    from polymarket_pnl.portfolio.models import ClosedPosition, PositionKey, Trade


def annotate_positions(
    positions: Sequence[ClosedPosition],
    annotations: Mapping[PositionKey, PositionAnnotation],
) -> list[ClosedPosition]:
    """
    Return copies of `positions` with annotation fields applied.

    Only fields the annotation actually sets are applied; positions without an
    annotation are returned unchanged. The input records are never mutated.
    """
    annotated: list[ClosedPosition] = []
    for pos in positions:
        annotation = annotations.get(pos.position_key)
        if annotation is None:
            annotated.append(pos)
            continue

        update: dict[str, Any] = {
            name: getattr(annotation, name)
            for name in annotation.model_fields_set
            if getattr(annotation, name) is not None
        }
        if "tags" in update:
            update["tags"] = list(update["tags"])
        annotated.append(pos.model_copy(update=update))
    return annotated


def first_buy_times(trades: Iterable[Trade]) -> dict[PositionKey, datetime]:
    """Earliest BUY timestamp per position key, regardless of input order."""
    earliest: dict[PositionKey, datetime] = {}
    for trade in trades:
        if trade.side is not TradeSide.BUY:
            continue
        current = earliest.get(trade.position_key)
        if current is None or trade.timestamp < current:
            earliest[trade.position_key] = trade.timestamp
    return earliest


def open_time_annotations(trades: Iterable[Trade]) -> dict[PositionKey, PositionAnnotation]:
    """Annotations correcting `opened_at` to each position's first BUY."""
    return {
        key: PositionAnnotation(opened_at=opened_at)
        for key, opened_at in first_buy_times(trades).items()
    }


def trade_counts(trades: Iterable[Trade]) -> dict[PositionKey, int]:
    """Number of trades (BUY and SELL) per position key."""
    return dict(Counter(trade.position_key for trade in trades))


def activity_annotations(trades: Iterable[Trade]) -> dict[PositionKey, PositionAnnotation]:
    """
    Annotations derived from a full activity history.

    Every key seen gets a `trades_count`; keys with at least one BUY also get
    `opened_at` set to their first BUY. Useful when the records being annotated
    were computed from a truncated history.
    """
    trades = list(trades)
    opened = first_buy_times(trades)
    annotations: dict[PositionKey, PositionAnnotation] = {}
    for key, count in trade_counts(trades).items():
        if key in opened:
            annotations[key] = PositionAnnotation(opened_at=opened[key], trades_count=count)
        else:
            annotations[key] = PositionAnnotation(trades_count=count)
    return annotations


def merge_annotations(
    *sources: Mapping[PositionKey, PositionAnnotation],
) -> dict[PositionKey, PositionAnnotation]:
    """Combine annotation maps; fields set by later sources override earlier ones."""
    merged: dict[PositionKey, PositionAnnotation] = {}
    for source in sources:
        for key, annotation in source.items():
            existing = merged.get(key)
            if existing is None:
                merged[key] = annotation
                continue
            update = {name: getattr(annotation, name) for name in annotation.model_fields_set}
            merged[key] = existing.model_copy(update=update)
    return merged
