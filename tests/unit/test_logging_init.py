from __future__ import annotations

import logging
from io import StringIO

from farmguard.logging.init import (
    LOGGER_NAME,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def _capture(logger: logging.Logger) -> StringIO:
    out = StringIO()
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    handler.setStream(out)
    return out


def test_setup_logging_creates_logger_with_labeled_formatter(clean_logging):
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes(clean_logging):
    logger = setup_logging()
    out = _capture(logger)

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    log_summary("files=1 success=1")

    lines = out.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY files=1 success=1",
    ]


def test_module_loggers_reach_package_handler(clean_logging):
    logger = setup_logging()
    out = _capture(logger)
    logging.getLogger("farmguard.services.pipeline").warning("child message")
    assert out.getvalue() == "WARN child message\n"


def test_setup_logging_idempotent(clean_logging):
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1
    assert get_logger() is logger1


def test_debug_mode_after_setup(clean_logging):
    logger = setup_logging()
    out = _capture(logger)
    logger.debug("hidden")
    setup_logging(debug=True)
    logger.debug("shown")
    assert out.getvalue() == "DEBUG shown\n"


def test_summary_level_registered(clean_logging):
    setup_logging()
    assert logging.getLevelName(25) == "SUMMARY"


def test_reset_logging_removes_handlers(clean_logging):
    logger = setup_logging()
    reset_logging()
    assert logger.handlers == []
