"""Portfolio-level statistics over closed-position records."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import Field

from polymarket_pnl.constants import (
    EMPTY_LABEL,
    HOLDING_TIME_MIN_GAP_SECONDS,
    LABEL_ELLIPSIS,
    LABEL_MAX_LENGTH,
    LABEL_TRUNCATED_LENGTH,
    SECONDS_PER_DAY,
    TOP_TAGS_LIMIT,
)
from polymarket_pnl.portfolio.models import CamelModel

if TYPE_CHECKING:
    from collections.abc import Sequence

    from polymarket_pnl.portfolio.models import ClosedPosition


class PositionSummary(CamelModel):
    """Summary of realized profit and loss across closed positions."""

    total_realized_pnl: float = Field(default=0.0, alias="totalRealizedPnL")
    winrate: float = 0.0
    """Percentage (0-100) of positions with positive realized P&L."""
    avg_pnl_per_position: float = Field(default=0.0, alias="avgPnLPerPosition")
    total_positions_closed: int = 0
    biggest_win: float = 0.0
    biggest_loss: float = 0.0
    avg_pos_size: float = 0.0
    avg_holding_time: float = 0.0
    """Mean open-to-close duration in days."""
    most_used_category: str = EMPTY_LABEL
    most_used_tag: str = EMPTY_LABEL
    top_tags: list[str] = Field(default_factory=list)


def truncate_label(label: str) -> str:
    """Shorten labels longer than 20 characters to 17 characters plus an ellipsis."""
    if len(label) > LABEL_MAX_LENGTH:
        return label[:LABEL_TRUNCATED_LENGTH] + LABEL_ELLIPSIS
    return label


def average_holding_days(positions: Sequence[ClosedPosition]) -> float:
    """
    Mean holding time in days over positions with a trustworthy open time.

    Only positions that are closed and whose open/close gap exceeds one minute
    count. Identical or near-identical timestamps mean the open time was unknown
    (e.g. a feed that reports only close times) and would drag the mean to zero.
    """
    durations: list[float] = []
    for pos in positions:
        if pos.closed_at is None:
            continue
        gap_seconds = (pos.closed_at - pos.opened_at).total_seconds()
        if abs(gap_seconds) <= HOLDING_TIME_MIN_GAP_SECONDS:
            continue
        durations.append(max(0.0, gap_seconds / SECONDS_PER_DAY))

    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def _most_common_label(counts: Counter[str]) -> str:
    # Counter.most_common keeps first-encountered order among equal counts.
    if not counts:
        return EMPTY_LABEL
    label, _count = counts.most_common(1)[0]
    return truncate_label(label)


def summarize_positions(positions: Sequence[ClosedPosition]) -> PositionSummary:
    """
    Reduce closed-position records to portfolio statistics.

    Category/tag annotations are optional: records without them are simply not
    counted. An empty input yields the all-zero summary with "-" labels.

    Args:
        positions: Closed-position records, annotated or not. Never mutated.

    Returns:
        PositionSummary for the whole list.
    """
    if not positions:
        return PositionSummary()

    count = len(positions)
    pnls = [pos.realized_pnl for pos in positions]
    total_realized = sum(pnls)
    winning = sum(1 for pnl in pnls if pnl > 0)

    category_counts: Counter[str] = Counter()
    tag_counts: Counter[str] = Counter()
    for pos in positions:
        if pos.category:
            category_counts[pos.category] += 1
        for tag in pos.tags or ():
            tag_counts[tag] += 1

    return PositionSummary(
        total_realized_pnl=total_realized,
        winrate=winning / count * 100,
        avg_pnl_per_position=total_realized / count,
        total_positions_closed=count,
        biggest_win=max(*pnls, 0.0),
        biggest_loss=min(*pnls, 0.0),
        avg_pos_size=sum(pos.size for pos in positions) / count,
        avg_holding_time=average_holding_days(positions),
        most_used_category=_most_common_label(category_counts),
        most_used_tag=_most_common_label(tag_counts),
        top_tags=[truncate_label(tag) for tag, _ in tag_counts.most_common(TOP_TAGS_LIMIT)],
    )
