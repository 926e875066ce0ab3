"""Tests for logging setup and timestamp helpers."""

import io
import logging
from datetime import datetime, timedelta, timezone

import pytest

from workpulse.utils.logging import ROOT_LOGGER, configure_logging
from workpulse.utils.timestamps import to_utc


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


class TestConfigureLogging:
    def test_writes_module_records(self, clean_logger):
        stream = io.StringIO()
        configure_logging("debug", fmt="%(name)s %(message)s", stream=stream)
        logging.getLogger("workpulse.engine").debug("hello")
        assert "workpulse.engine hello" in stream.getvalue()

    def test_repeat_call_adds_no_handler(self, clean_logger):
        configure_logging(logging.INFO, stream=io.StringIO())
        logger = configure_logging(logging.WARNING, stream=io.StringIO())
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_unknown_level_name(self, clean_logger):
        with pytest.raises(ValueError, match="Unknown logging level"):
            configure_logging("chatty")


class TestToUtc:
    def test_naive_assumed_utc(self):
        assert to_utc(datetime(2024, 1, 1, 8)) == datetime(2024, 1, 1, 8, tzinfo=timezone.utc)

    def test_offset_converted(self):
        moment = datetime(2024, 1, 1, 8, tzinfo=timezone(timedelta(hours=2)))
        result = to_utc(moment)
        assert result.hour == 6
        assert result.tzinfo == timezone.utc
