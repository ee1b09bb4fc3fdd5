"""Tests for logging utilities."""

from __future__ import annotations

import logging

import pytest

from chainwire.core.config import LoggingSettings
from chainwire.core.logging import VALUE_LOGGER_NAME, configure_logging, log_value


def test_configure_logging_sets_root_level() -> None:
    """configure_logging should set the root logger level according to settings."""

    settings = LoggingSettings(level="DEBUG", structured=False)
    configure_logging(settings)
    assert logging.getLogger().level == logging.DEBUG


def test_structured_logging_configures_cleanly() -> None:
    configure_logging(LoggingSettings(level="WARNING", structured=True))
    assert logging.getLogger().level == logging.WARNING


def test_log_value_tags_each_value(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger=VALUE_LOGGER_NAME):
        log_value("user.create", {"id": 1}, "done")

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["[user.create] {'id': 1}", "[user.create] 'done'"]


def test_logger_overrides_and_value_level() -> None:
    configure_logging(
        LoggingSettings(
            level="info",
            value_level="WARNING",
            loggers={"chainwire.core.chain": "debug"},
        )
    )

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("chainwire.core.chain").level == logging.DEBUG
    assert logging.getLogger(VALUE_LOGGER_NAME).level == logging.WARNING
