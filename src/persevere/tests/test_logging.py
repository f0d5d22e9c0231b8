"""Tests for logging configuration and engine log output."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from persevere import FailedAttemptError, configure_logging, retry
from persevere.runtime.observability import ROOT_LOGGER


@pytest.fixture
def root_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_json_format(root_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging(format="json", level="info", output=stream)

    logging.getLogger("persevere.retry").info("Attempt 1 failed")

    record = orjson.loads(stream.getvalue().splitlines()[-1])
    assert record["level"] == "info"
    assert record["logger"] == "persevere.retry"
    assert record["event"] == "Attempt 1 failed"
    assert "timestamp" in record


def test_text_format(root_logger: logging.Logger) -> None:
    stream = io.StringIO()
    configure_logging(format="text", level="WARNING", output=stream)

    logging.getLogger("persevere.scheduler").warning("Giving up")
    logging.getLogger("persevere.scheduler").info("hidden")

    output = stream.getvalue()
    assert "[WARNING] persevere.scheduler: Giving up" in output
    assert "hidden" not in output


def test_reconfigure_replaces_handler(root_logger: logging.Logger) -> None:
    first = configure_logging(format="text", output=io.StringIO())
    second = configure_logging(format="json", output=io.StringIO())

    assert first not in root_logger.handlers
    assert second in root_logger.handlers


def test_settings_provide_defaults(root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    from persevere.foundation.config import clear_settings_cache

    monkeypatch.setenv("PERSEVERE_LOG_FORMAT", "json")
    monkeypatch.setenv("PERSEVERE_LOG_LEVEL", "DEBUG")
    clear_settings_cache()

    handler = configure_logging(output=io.StringIO())

    assert root_logger.level == logging.DEBUG
    assert type(handler.formatter).__name__ == "JsonFormatter"


def test_unknown_format_rejected(root_logger: logging.Logger) -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


@pytest.mark.asyncio
async def test_engine_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    async def op(attempt_number: int) -> None:
        raise ConnectionError("refused")

    with caplog.at_level(logging.INFO, logger=ROOT_LOGGER):
        with pytest.raises(FailedAttemptError):
            await retry(op, retries=1)

    messages = [r.getMessage() for r in caplog.records if r.name == "persevere.retry"]
    assert any("Attempt 1 failed (TRANSIENT)" in m for m in messages)
    assert any("Giving up after 2 attempts (BUDGET_EXHAUSTED)" in m for m in messages)
