"""Custom exceptions for P&L computation inputs."""

from __future__ import annotations


class PnLError(Exception):
    """Base exception for polymarket-pnl errors."""


class TradeNormalizationError(PnLError):
    """A raw feed trade could not be turned into a valid Trade."""

    def __init__(self, message: str, raw_id: str | None = None) -> None:
        self.message = message
        self.raw_id = raw_id
        prefix = f"Trade {raw_id!r}: " if raw_id else ""
        super().__init__(f"{prefix}{message}")


class InputFileError(PnLError):
    """Input file is missing, not valid JSON, or has an unexpected schema."""

    def __init__(self, path: object, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")
