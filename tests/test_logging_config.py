# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.config.logging_config import setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Reset the quickcart logger and redirect logs to a temp dir."""
        self._clear_handlers()
        self.addCleanup(self._clear_handlers)
        logs_dir = Path(tempfile.mkdtemp()) / "logs"
        patcher = patch.object(Settings, "LOGS_DIR", logs_dir)
        patcher.start()
        self.addCleanup(patcher.stop)

    @staticmethod
    def _clear_handlers() -> None:
        root_logger = logging.getLogger("quickcart")
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)

    def _console_handler(self) -> logging.Handler:
        handlers = [
            h
            for h in logging.getLogger("quickcart").handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(handlers), 1)
        return handlers[0]

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging()
        root_logger = logging.getLogger("quickcart")
        file_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler should be set to WARNING level."""
        setup_logging()
        root_logger = logging.getLogger("quickcart")
        stream_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger("quickcart")
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_child_loggers_reach_the_file(self) -> None:
        """quickcart.* records propagate into the run's log file."""
        log_path = setup_logging()
        logging.getLogger("quickcart.cart").debug("cart debug message")
        for handler in logging.getLogger("quickcart").handlers:
            handler.flush()
        self.assertIn(
            "cart debug message", log_path.read_text(encoding="utf-8"),
        )

    def test_repeated_calls_return_active_file(self) -> None:
        """A second call reports the log file already in use."""
        first = setup_logging()
        self.assertEqual(setup_logging(), first)

    def test_console_level_from_settings(self) -> None:
        """CONSOLE_LOG_LEVEL controls the stderr handler."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "info"):
            setup_logging()
        self.assertEqual(self._console_handler().level, logging.INFO)

    def test_unknown_console_level_falls_back_to_warning(self) -> None:
        """A misspelt level name keeps the WARNING default."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "chatty"):
            setup_logging()
        self.assertEqual(self._console_handler().level, logging.WARNING)

    def test_old_run_logs_pruned(self) -> None:
        """Only the newest MAX_LOG_FILES run logs survive."""
        Settings.LOGS_DIR.mkdir(parents=True)
        for day in range(1, 6):
            (Settings.LOGS_DIR / f"run_2020010{day}_000000.log").touch()
        (Settings.LOGS_DIR / "notes.txt").touch()

        with patch.object(Settings, "MAX_LOG_FILES", 3):
            log_path = setup_logging()

        runs = sorted(p.name for p in Settings.LOGS_DIR.glob("run_*.log"))
        self.assertEqual(
            runs,
            ["run_20200104_000000.log", "run_20200105_000000.log",
             log_path.name],
        )
        self.assertTrue((Settings.LOGS_DIR / "notes.txt").exists())

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")


if __name__ == "__main__":
    unittest.main()
