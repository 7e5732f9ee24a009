"""Pydantic model for raw trade records as delivered by the Polymarket data feed."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawTrade(BaseModel):
    """Single trade from the upstream feed, before normalization.

    The feed is loosely shaped: identifiers arrive under several keys, nested
    objects, or packed into `tokenId` as `conditionId:outcome`, and numbers may be
    strings. Unknown keys are kept (`extra="allow"`).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str | None = None
    hash: str | None = Field(
        default=None, validation_alias=AliasChoices("hash", "transactionHash", "transaction_hash")
    )
    timestamp: str | int | float | None = None
    user: str | None = None

    condition_id: str | None = Field(
        default=None, validation_alias=AliasChoices("conditionId", "condition_id")
    )
    token_id: str | None = Field(default=None, validation_alias=AliasChoices("tokenId", "token_id"))
    outcome: str | None = None
    market: dict[str, Any] | str | None = None
    asset: dict[str, Any] | str | None = None

    side: str | None = None
    price: Any = None
    size: Any = None
    fees: Any = None

    event_title: str | None = Field(
        default=None, validation_alias=AliasChoices("eventTitle", "event_title", "title")
    )
    market_title: str | None = Field(
        default=None, validation_alias=AliasChoices("marketTitle", "market_title")
    )
    outcome_name: str | None = Field(
        default=None, validation_alias=AliasChoices("outcomeName", "outcome_name")
    )
    event_slug: str | None = Field(
        default=None, validation_alias=AliasChoices("eventSlug", "event_slug")
    )
    slug: str | None = None
    icon: str | None = None

    @field_validator("id", "hash", "condition_id", "token_id", "outcome", mode="before")
    @classmethod
    def normalize_identifier(cls, value: object) -> str | None:
        """Coerce numeric identifiers to strings and empty strings to None."""
        if value is None or value == "":
            return None
        return str(value)

    @property
    def resolved_condition_id(self) -> str | None:
        """conditionId from the first field that carries it."""
        if self.condition_id:
            return self.condition_id
        if isinstance(self.market, dict) and self.market.get("conditionId"):
            return str(self.market["conditionId"])
        if self.token_id:
            return self.token_id.split(":")[0] or None
        return None

    @property
    def resolved_outcome(self) -> str | None:
        """Outcome from the first field that carries it."""
        if self.outcome:
            return self.outcome
        if self.token_id and ":" in self.token_id:
            return self.token_id.split(":")[1] or None
        if isinstance(self.asset, dict) and self.asset.get("outcome") not in (None, ""):
            return str(self.asset["outcome"])
        return None
