# Area: Shared
"""
Shared utilities used by the ledger, session and resolver layers.

This package contains:
- Logging configuration
- Attempt lifecycle logger
- Display formatting helpers
"""

from .logging_config import (
    setup_logging,
    log_failure,
    enable_lifecycle_mode,
    disable_lifecycle_mode,
)
from .attempt_logger import get_attempt_logger, AttemptLogger
from .formatting import format_time, format_address, format_ether

__all__ = [
    "setup_logging",
    "log_failure",
    "enable_lifecycle_mode",
    "disable_lifecycle_mode",
    "get_attempt_logger",
    "AttemptLogger",
    "format_time",
    "format_address",
    "format_ether",
]
