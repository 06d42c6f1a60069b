"""
Tests for loguru sink configuration
"""

import sys
import pytest
from loguru import logger

from utils.logging_setup import configure_logging


@pytest.fixture
def captured():
    """Sink standing in for the console handlers of an earlier setup"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    try:
        logger.remove(handler_id)
    except ValueError:
        pass


@pytest.fixture
def restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestConfigureLogging:
    """Sink setup"""

    def test_unknown_level_keeps_existing_sinks(self, captured):
        with pytest.raises(ValueError):
            configure_logging('VERBOSE')

        logger.error("setup failed")

        assert captured == ["setup failed"]

    def test_errors_go_to_stderr_only(self, capsys, restore_default_sink):
        configure_logging('INFO')

        logger.info("progress line")
        logger.error("error detail")

        out, err = capsys.readouterr()
        assert "progress line" in out
        assert "error detail" not in out
        assert "error detail" in err
        assert "progress line" not in err
