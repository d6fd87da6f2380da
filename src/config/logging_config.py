# src/config/logging_config.py

"""Per-run logging for QuickCart commands.

Every CLI invocation writes ``logs/run_<YYYYmmdd_HHMMSS>.log`` at DEBUG
so one run's store access, cart changes and report output read back in
order. The console only shows ``Settings.CONSOLE_LOG_LEVEL`` and above
(WARNING unless ``QUICKCART_LOG_LEVEL`` says otherwise). Only the newest
``Settings.MAX_LOG_FILES`` run logs are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

PROJECT_LOGGER = "quickcart"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    """Resolve the configured console level name, WARNING if unknown."""
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.WARNING


def _prune_old_logs(logs_dir: Path, keep: int) -> None:
    """Delete all but the newest *keep* run logs."""
    runs = sorted(logs_dir.glob("run_*.log"), reverse=True)
    for stale in runs[keep:]:
        try:
            stale.unlink()
        except OSError:
            # Still open elsewhere; the next run retries
            continue


def _active_log_file(project_logger: logging.Logger) -> Path | None:
    for handler in project_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging() -> Path:
    """Attach the run's file and console handlers to ``quickcart``.

    Calling it again in the same process keeps the existing handlers
    and returns the log file already in use.
    """
    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(logging.DEBUG)

    active = _active_log_file(project_logger)
    if active is not None:
        return active

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    _prune_old_logs(logs_dir, max(0, Settings.MAX_LOG_FILES - 1))

    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    project_logger.addHandler(file_handler)
    project_logger.addHandler(console_handler)
    project_logger.info("Logging to %s", log_file)
    return log_file
