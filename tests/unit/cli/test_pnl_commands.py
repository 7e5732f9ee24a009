from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from polymarket_pnl.cli import app

runner = CliRunner()

TRADES = [
    {
        "id": "1",
        "timestamp": "2024-01-01T00:00:00Z",
        "conditionId": "0xcond",
        "outcome": "Yes",
        "side": "BUY",
        "price": 0.5,
        "size": 100,
        "fees": 1,
        "title": "Will it rain?",
    },
    {
        "id": "2",
        "timestamp": "2024-01-03T00:00:00Z",
        "conditionId": "0xcond",
        "outcome": "Yes",
        "side": "SELL",
        "price": 0.6,
        "size": 100,
        "fees": 1,
    },
    {
        "id": "3",
        "timestamp": "2024-01-02T00:00:00Z",
        "conditionId": "0xother",
        "outcome": "No",
        "side": "BUY",
        "price": 0.3,
        "size": 10,
    },
]


def _write(name: str, payload: object) -> Path:
    path = Path(name)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "polymarket-pnl v" in result.stdout


def test_compute_json_output() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)

        result = runner.invoke(app, ["compute", "trades.json", "--json"])

    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["tradesCount"] == 3
    assert payload["rejectedTrades"] == 0
    assert len(payload["positions"]) == 1
    position = payload["positions"][0]
    assert position["conditionId"] == "0xcond"
    assert position["realizedPnL"] == pytest.approx(8.0)
    assert position["closedAt"] is not None
    summary = payload["summary"]
    assert summary["totalRealizedPnL"] == pytest.approx(8.0)
    assert summary["winrate"] == pytest.approx(100.0)
    assert summary["mostUsedCategory"] == "-"
    assert summary["avgHoldingTime"] == pytest.approx(2.0)


def test_compute_accepts_wrapped_trades_and_annotations() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", {"trades": TRADES})
        _write(
            "annotations.json",
            {
                "0xcond:Yes": {
                    "category": "Weather",
                    "tags": ["Rain", "Forecasts"],
                    "openedAt": "2023-12-30T00:00:00Z",
                }
            },
        )

        result = runner.invoke(
            app, ["compute", "trades.json", "--annotations", "annotations.json", "--json"]
        )

    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["positions"][0]["category"] == "Weather"
    assert payload["summary"]["mostUsedCategory"] == "Weather"
    assert payload["summary"]["topTags"] == ["Rain", "Forecasts"]
    assert payload["summary"]["avgHoldingTime"] == pytest.approx(4.0)


def test_compute_table_output_and_rejected_trades() -> None:
    trades = [*TRADES, {"id": "bad", "timestamp": "2024-01-04T00:00:00Z", "price": "x"}]
    with runner.isolated_filesystem():
        _write("trades.json", trades)

        result = runner.invoke(app, ["compute", "trades.json"])

    assert result.exit_code == 0, result.stdout
    assert "P&L Summary" in result.stdout
    assert "Closed Positions" in result.stdout
    assert "Skipped 1 malformed trade" in result.stdout


def test_compute_warns_about_oversold_shares() -> None:
    trades = [
        {
            "id": "1",
            "timestamp": "2024-01-01T00:00:00Z",
            "conditionId": "0xcond",
            "outcome": "Yes",
            "side": "SELL",
            "price": 0.6,
            "size": 10,
        }
    ]
    with runner.isolated_filesystem():
        _write("trades.json", trades)

        result = runner.invoke(app, ["compute", "trades.json", "--no-positions"])

    assert result.exit_code == 0, result.stdout
    assert "sold without matching buys" in result.stdout
    assert "Closed Positions" not in result.stdout


def test_compute_empty_history() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", [])

        result = runner.invoke(app, ["compute", "trades.json"])

    assert result.exit_code == 0
    assert "No closed positions found" in result.stdout


def test_compute_missing_file_exits_cleanly() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["compute", "missing.json"])

    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_compute_invalid_json_exits_cleanly() -> None:
    with runner.isolated_filesystem():
        Path("trades.json").write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["compute", "trades.json"])

    assert result.exit_code == 1
    assert "not valid JSON" in result.stdout


def test_compute_rejects_unexpected_schema() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", {"rows": []})

        result = runner.invoke(app, ["compute", "trades.json"])

    assert result.exit_code == 1
    assert "must contain a JSON list" in result.stdout


def test_compute_rejects_bad_annotation_key() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)
        _write("annotations.json", {"no-colon": {"category": "X"}})

        result = runner.invoke(app, ["compute", "trades.json", "-a", "annotations.json"])

    assert result.exit_code == 1
    assert "Invalid annotation" in result.stdout


def test_summary_from_closed_positions_file() -> None:
    positions = [
        {
            "conditionId": "a",
            "outcome": "Yes",
            "size": 100,
            "realizedPnL": 12.5,
            "openedAt": "2024-01-01T00:00:00Z",
            "closedAt": "2024-01-01T00:00:00Z",
            "category": "Sports",
        },
        {
            "conditionId": "b",
            "outcome": "No",
            "size": 50,
            "realizedPnL": -2.5,
            "openedAt": "2024-01-01T00:00:00Z",
            "closedAt": "2024-01-03T00:00:00Z",
            "tags": ["NBA"],
        },
    ]
    with runner.isolated_filesystem():
        _write("positions.json", {"positions": positions})

        result = runner.invoke(app, ["summary", "positions.json", "--json"])

    assert result.exit_code == 0, result.stdout
    summary = json.loads(result.stdout)
    assert summary["totalRealizedPnL"] == pytest.approx(10.0)
    assert summary["totalPositionsClosed"] == 2
    assert summary["winrate"] == pytest.approx(50.0)
    assert summary["biggestLoss"] == pytest.approx(-2.5)
    # The first record has identical open/close times and is excluded.
    assert summary["avgHoldingTime"] == pytest.approx(2.0)
    assert summary["mostUsedCategory"] == "Sports"
    assert summary["mostUsedTag"] == "NBA"


def test_summary_invalid_record_exits_cleanly() -> None:
    with runner.isolated_filesystem():
        _write("positions.json", [{"conditionId": "a"}])

        result = runner.invoke(app, ["summary", "positions.json"])

    assert result.exit_code == 1
    assert "Invalid closed position" in result.stdout


def test_compute_activity_corrects_open_time_and_trade_count() -> None:
    activity = [
        {
            "id": "0",
            "timestamp": "2023-12-29T00:00:00Z",
            "conditionId": "0xcond",
            "outcome": "Yes",
            "side": "BUY",
            "price": 0.4,
            "size": 50,
        },
        *TRADES,
    ]
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)
        _write("activity.json", {"trades": activity})

        result = runner.invoke(
            app, ["compute", "trades.json", "--activity", "activity.json", "--json"]
        )

    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    position = payload["positions"][0]
    assert position["tradesCount"] == 3
    assert position["openedAt"].startswith("2023-12-29")
    assert payload["summary"]["avgHoldingTime"] == pytest.approx(5.0)


def test_compute_annotations_file_overrides_activity() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)
        _write("activity.json", TRADES)
        _write("annotations.json", {"0xcond:Yes": {"tradesCount": 9}})

        result = runner.invoke(
            app,
            [
                "compute",
                "trades.json",
                "--activity",
                "activity.json",
                "-a",
                "annotations.json",
                "--json",
            ],
        )

    assert result.exit_code == 0, result.stdout
    position = json.loads(result.stdout)["positions"][0]
    assert position["tradesCount"] == 9
    assert position["openedAt"].startswith("2024-01-01")


def test_compute_missing_activity_file_exits_cleanly() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)

        result = runner.invoke(app, ["compute", "trades.json", "--activity", "nope.json"])

    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_compute_interrupted_exits_130() -> None:
    with runner.isolated_filesystem():
        _write("trades.json", TRADES)

        with patch(
            "polymarket_pnl.portfolio.compute_closed_positions",
            side_effect=KeyboardInterrupt,
        ):
            result = runner.invoke(app, ["compute", "trades.json"])

    assert result.exit_code == 130
    assert "Interrupted." in result.stdout


def test_summary_interrupted_exits_130() -> None:
    with runner.isolated_filesystem():
        _write("positions.json", [])

        with patch(
            "polymarket_pnl.portfolio.summarize_positions",
            side_effect=KeyboardInterrupt,
        ):
            result = runner.invoke(app, ["summary", "positions.json"])

    assert result.exit_code == 130
    assert "Interrupted." in result.stdout
