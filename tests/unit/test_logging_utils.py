#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for logging configuration."""
import logging
from pathlib import Path

import pytest

from cleanstate.logging_utils import PACKAGE_LOGGER, configure_logging, remove_handlers


def installed(logger: logging.Logger) -> list[logging.Handler]:
    """Return the handlers ``configure_logging`` owns on ``logger``."""
    return [h for h in logger.handlers if getattr(h, "_cleanstate_handler", False)]


@pytest.mark.unit
class TestConfigureLogging:
    """Test handler installation on the package logger."""

    def test_configures_package_logger(self) -> None:
        """Test that the package logger, not the root logger, receives the handlers."""
        root_handlers = list(logging.getLogger().handlers)
        root_level = logging.getLogger().level

        logger = configure_logging("debug")

        assert logger is logging.getLogger(PACKAGE_LOGGER)
        assert logger.level == logging.DEBUG
        assert len(installed(logger)) == 1
        assert logging.getLogger().handlers == root_handlers
        assert logging.getLogger().level == root_level

    def test_reconfiguring_replaces_handlers(self) -> None:
        """Test that repeated calls do not stack console handlers."""
        configure_logging("INFO")
        logger = configure_logging("WARNING")
        assert len(installed(logger)) == 1
        assert logger.level == logging.WARNING

    def test_host_handlers_survive(self) -> None:
        """Test that handlers added by the embedding application are kept."""
        logger = logging.getLogger(PACKAGE_LOGGER)
        host_handler = logging.NullHandler()
        logger.addHandler(host_handler)
        try:
            configure_logging("INFO")
            remove_handlers()
            assert logger.handlers == [host_handler]
        finally:
            logger.removeHandler(host_handler)

    def test_records_still_propagate(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that host-side capture still sees package records."""
        configure_logging("INFO")
        logging.getLogger("cleanstate.persistence.controller").info("saved")
        assert "saved" in caplog.text

    def test_unknown_level_name_falls_back_to_info(self) -> None:
        """Test resolving an unrecognized level name."""
        assert configure_logging("chatty").level == logging.INFO

    def test_numeric_level(self) -> None:
        """Test passing a numeric level."""
        assert configure_logging(logging.ERROR).level == logging.ERROR

    def test_log_file(self, tmp_path: Path) -> None:
        """Test that records are copied to the log file."""
        log_file = tmp_path / "cleanstate.log"
        configure_logging("INFO", log_file=str(log_file))
        logging.getLogger("cleanstate.storage.file").info("wrote entry")
        remove_handlers()
        assert "cleanstate INFO: wrote entry" in log_file.read_text(encoding="utf-8")

    def test_trace_format(self, tmp_path: Path) -> None:
        """Test that trace mode includes the emitting module."""
        log_file = tmp_path / "trace.log"
        configure_logging("INFO", log_file=str(log_file), trace_mode=True)
        logging.getLogger("cleanstate.session").info("started")
        remove_handlers()
        assert "[INFO] [cleanstate.session] started" in log_file.read_text(encoding="utf-8")

    def test_unopenable_log_file_is_reported(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a bad log path is logged and the console handler stays."""
        logger = configure_logging("INFO", log_file=str(tmp_path / "missing" / "x.log"))
        assert len(installed(logger)) == 1
        assert "Could not open log file" in caplog.text
