"""Tests for billfold.logs."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from billfold.logs import LOGGER_NAME, configure_logging


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_quiet_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should drop info events unless verbose."""
        configure_logging()
        structlog.get_logger("billfold.services.months").info("month.created", month="2025-03")
        assert capsys.readouterr().err == ""

    def test_json_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should write one JSON object per event to stderr."""
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("billfold.services.months").info("month.created", month="2025-03")

        captured = capsys.readouterr()
        event = json.loads(captured.err.strip())
        assert captured.out == ""
        assert event["event"] == "month.created"
        assert event["level"] == "info"
        assert event["month"] == "2025-03"

    def test_reconfigure_replaces_handler(self) -> None:
        """Should keep a single handler on the billfold logger."""
        configure_logging()
        configure_logging(verbose=True)
        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
