"""Pydantic models for trades, closed positions, and annotations."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PositionKey = tuple[str, str]
"""(condition_id, outcome): all trades sharing it affect the same position."""


def format_position_key(key: PositionKey) -> str:
    """Render a position key as `conditionId:outcome`."""
    condition_id, outcome = key
    return f"{condition_id}:{outcome}"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so aware and naive values stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_position_key(value: str) -> PositionKey:
    """Parse a `conditionId:outcome` string (outcome after the last colon)."""
    condition_id, sep, outcome = value.rpartition(":")
    if not sep or not condition_id:
        raise ValueError(f"Position key must look like 'conditionId:outcome' (got {value!r})")
    return condition_id, outcome


class CamelModel(BaseModel):
    """Base model serializing to the dashboard's camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class TradeSide(str, Enum):
    """Trade direction."""

    BUY = "BUY"
    SELL = "SELL"


class Trade(CamelModel):
    """Normalized trade, the only shape the FIFO engine accepts."""

    id: str
    timestamp: datetime
    condition_id: str
    outcome: str
    side: TradeSide
    price: float = Field(..., ge=0)
    size: float = Field(..., ge=0, description="Shares traded")
    notional: float = Field(..., ge=0, description="Supplied price x size, not recomputed")
    fees: float = Field(default=0.0, ge=0)

    user: str | None = None
    event_title: str | None = None
    market_title: str | None = None
    outcome_name: str | None = None
    event_slug: str | None = None
    slug: str | None = None
    icon: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def position_key(self) -> PositionKey:
        return (self.condition_id, self.outcome)


class ClosedPosition(CamelModel):
    """Accounting record for a position key that has seen at least one SELL."""

    condition_id: str
    outcome: str
    side: Literal["Long YES", "Long NO"] | None = None

    size: float
    """Cumulative SELL quantity, oversold shares included."""

    realized_pnl: float = Field(alias="realizedPnL")
    realized_pnl_percent: float = Field(default=0.0, alias="realizedPnLPercent")
    entry_vwap: float = Field(default=0.0, alias="entryVWAP")
    exit_vwap: float = Field(default=0.0, alias="exitVWAP")

    opened_at: datetime
    closed_at: datetime | None = None
    """Set only while the position is flat."""

    open_quantity_remaining: float = 0.0
    avg_entry_price_open: float | None = None
    oversold_quantity: float = 0.0
    trades_count: int = 0

    event_title: str | None = None
    market_title: str | None = None
    outcome_name: str | None = None
    event_slug: str | None = None
    slug: str | None = None
    icon: str | None = None

    # Attached by the caller after the engine runs.
    category: str | None = None
    tags: list[str] | None = None

    @field_validator("opened_at", "closed_at")
    @classmethod
    def _utc_timestamps(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @property
    def position_key(self) -> PositionKey:
        return (self.condition_id, self.outcome)

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None


class PositionAnnotation(CamelModel):
    """Caller-sourced enrichment for a closed position (richer activity feeds)."""

    category: str | None = None
    tags: list[str] | None = None
    opened_at: datetime | None = None
    trades_count: int | None = Field(default=None, ge=0)

    @field_validator("opened_at")
    @classmethod
    def _utc_opened_at(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None
