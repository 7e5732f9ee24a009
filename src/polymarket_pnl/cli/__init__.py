"""
CLI application for Polymarket P&L.

Computes FIFO realized P&L and portfolio statistics from trade history files.
"""

from __future__ import annotations

import typer
from dotenv import find_dotenv, load_dotenv

from polymarket_pnl.cli.compute import pnl_compute
from polymarket_pnl.cli.summary_cmd import pnl_summary
from polymarket_pnl.cli.utils import console

app = typer.Typer(
    name="polymarket-pnl",
    help="Polymarket P&L - FIFO realized profit/loss from prediction-market trade history.",
    add_completion=False,
)

app.command("compute")(pnl_compute)
app.command("summary")(pnl_summary)


@app.callback()
def main() -> None:
    """Polymarket P&L CLI."""
    from polymarket_pnl.logging import configure_structlog

    load_dotenv(find_dotenv(usecwd=True))
    # Pick up POLYMARKET_PNL_LOG_LEVEL from .env.
    configure_structlog()


@app.command()
def version() -> None:
    """Show version information."""
    from polymarket_pnl import __version__

    console.print(f"polymarket-pnl v{__version__}")


__all__ = ["app"]
