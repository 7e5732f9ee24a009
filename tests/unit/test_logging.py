from __future__ import annotations


def test_configure_structlog_warns_on_invalid_log_level(monkeypatch, capfd) -> None:
    from polymarket_pnl.logging import configure_structlog

    monkeypatch.setenv("POLYMARKET_PNL_LOG_LEVEL", "not-a-level")
    configure_structlog()

    captured = capfd.readouterr()
    assert "Invalid POLYMARKET_PNL_LOG_LEVEL" in captured.err


def test_configure_structlog_accepts_lowercase_level(monkeypatch, capfd) -> None:
    from polymarket_pnl.logging import configure_structlog

    monkeypatch.setenv("POLYMARKET_PNL_LOG_LEVEL", "debug")
    configure_structlog()

    captured = capfd.readouterr()
    assert "Invalid" not in captured.err

    monkeypatch.delenv("POLYMARKET_PNL_LOG_LEVEL")
    configure_structlog()
