# Area: Shared
"""
fhe_quest._shared.logging_config — Structured logging setup
===========================================================

Configures dual logging: terminal (colored) + file (JSON).
Lifecycle mode suppresses standard logs on the terminal while the
attempt logger prints its own colored lines.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import FheQuestError

# Package logger
logger = logging.getLogger("fhe_quest")

# Flag to control lifecycle-only terminal output
_lifecycle_mode_enabled = False


class LifecycleFilter(logging.Filter):
    """Filter that suppresses terminal logs when lifecycle mode is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _lifecycle_mode_enabled


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("error_type", "tx_hash", "coordinate"):
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = str(value)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(
    log_file_path: str = "fhe_quest.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str
        Path to the log file. Defaults to 'fhe_quest.log' in current dir.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger("fhe_quest")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(LifecycleFilter())
    pkg_logger.addHandler(terminal_handler)

    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    pkg_logger.propagate = False


def log_failure(error: "FheQuestError") -> None:
    """
    Log a classified failure in the structured format.

    The formatted block goes to stderr verbatim; the log file gets a
    single JSON record carrying the error type.
    """
    print(error.format_error_log(), file=sys.stderr)

    logger.error(
        f"Failure: {error.__class__.__name__}: {error}",
        extra={
            "error_type": error.error_type,
            "tx_hash": getattr(error, "tx_hash", None),
        },
    )


def enable_lifecycle_mode() -> None:
    """
    Enable lifecycle logging mode.

    In lifecycle mode standard logs are suppressed from the terminal and
    only attempt lifecycle lines are shown. File logging is unchanged.
    """
    global _lifecycle_mode_enabled
    _lifecycle_mode_enabled = True


def disable_lifecycle_mode() -> None:
    """Disable lifecycle logging mode (restore standard logging)."""
    global _lifecycle_mode_enabled
    _lifecycle_mode_enabled = False
