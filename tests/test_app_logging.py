"""Tests for logging configuration."""

import logging

from macro_ledger.app_logging import LOGGER_NAME, configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_configure_logging_updates_level() -> None:
    logger = configure_logging("debug")

    assert logger.name == "macro_ledger"
    assert logger.level == logging.DEBUG

    configure_logging("warning")

    assert logger.level == logging.WARNING
