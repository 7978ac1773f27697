"""
Tests for logging setup.
"""

import pytest
from loguru import logger

from thoughtgraph.utils.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()


@pytest.mark.unit
class TestLogging:
    """Tests for setup_logging() and get_logger()."""

    def test_console_only(self):
        """Test one sink by default."""
        assert len(setup_logging(level="debug")) == 1

    def test_file_sink(self, tmp_path):
        """Test the file sink creates the log directory."""
        log_dir = tmp_path / "logs"
        sink_ids = setup_logging(log_to_file=True, log_dir=str(log_dir), serialize=False)

        assert len(sink_ids) == 2
        assert log_dir.is_dir()

    def test_bound_module(self):
        """Test records carry the module name."""
        setup_logging()
        records = []
        logger.add(records.append, format="{extra[module]} {message}")

        get_logger("thoughtgraph.test").info("hello")

        assert records[0].strip() == "thoughtgraph.test hello"
