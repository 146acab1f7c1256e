"""Tests for logging configuration (LOG_LEVEL, LOG_FILE)."""

from __future__ import annotations

import logging

from eventcal.infra.logging_config import configure_logging


def test_log_level_defaults_to_info(monkeypatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    configure_logging()
    assert logging.getLogger().level == logging.INFO


def test_log_level_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "  debug ")
    configure_logging()
    assert logging.getLogger().level == logging.DEBUG


def test_log_level_invalid_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "INVALID_LEVEL")
    configure_logging()
    assert logging.getLogger().level == logging.INFO


def test_explicit_level_wins(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    configure_logging(level=logging.ERROR)
    assert logging.getLogger().level == logging.ERROR


def test_repeated_calls_do_not_duplicate_handlers(monkeypatch) -> None:
    monkeypatch.delenv("LOG_FILE", raising=False)
    configure_logging()
    configure_logging()
    assert len(logging.getLogger().handlers) == 1


def test_log_file_receives_records(tmp_path, monkeypatch) -> None:
    log_file = tmp_path / "logs" / "eventcal.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    configure_logging(level=logging.INFO)
    logging.getLogger("eventcal.test").info("Notification fired: event_id=%s", "1")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "event_id=1" in log_file.read_text(encoding="utf-8")
    monkeypatch.delenv("LOG_FILE")
    configure_logging()


def test_noisy_libraries_are_quieted() -> None:
    configure_logging(level=logging.DEBUG)
    assert logging.getLogger("apscheduler").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_unusable_log_file_keeps_stderr_only(tmp_path, monkeypatch) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.delenv("LOG_FILE", raising=False)
    configure_logging(log_file=str(blocker / "eventcal.log"))
    assert len(logging.getLogger().handlers) == 1
