# Area: Shared
"""
fhe_quest._shared.attempt_logger — Attempt lifecycle logging
============================================================

Colored terminal lines for the search-attempt lifecycle: status steps,
transactions sent, contract events received and terminal outcomes.
"""

from __future__ import annotations
import sys
from datetime import datetime, timedelta
from typing import Optional

from .formatting import format_address, format_ether

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Chain traffic
ORANGE = "\033[38;5;208m"  # Lifecycle steps
RED = "\033[31m"           # Errors
RESET = "\033[0m"

# ══════════════════════════════════════════════════════════════
# STATUS → STEP DESCRIPTION
# ══════════════════════════════════════════════════════════════

STEP_DESCRIPTIONS = {
    "SELECTED": "Coordinate selected",
    "ENCRYPTING": "Encrypting coordinates...",
    "SUBMITTING": "Sending transaction to blockchain...",
    "AWAITING_CONFIRMATION": "Waiting for transaction confirmation...",
    "AWAITING_ORACLE": "Transaction confirmed! Waiting for oracle callback...",
    "RESOLVED": "Result received",
    "TIMED_OUT": "No oracle callback, assuming a miss",
    "FAILED": "Search failed",
}

# Contract function → display name
FUNCTION_DISPLAY_NAMES = {
    "searchTreasure": "SEARCH",
    "createGame": "CREATE-GAME",
}


class AttemptLogger:
    """Logger for attempt lifecycle steps and chain traffic."""

    def __init__(self, account: Optional[str] = None):
        self._account = account

    def set_account(self, account: Optional[str]) -> None:
        """Set the account shown on each line."""
        self._account = account

    def _who(self) -> str:
        return format_address(self._account) if self._account else "no-account"

    def _now(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def _now_ms(self) -> str:
        return datetime.now().strftime("%H:%M:%S:%f")[:-3]

    def _deadline(self, seconds: float) -> str:
        if seconds <= 0:
            return "N/A"
        return (datetime.now() + timedelta(seconds=seconds)).strftime("%H:%M:%S")

    def log_step(self, status: str, coordinate: Optional[object] = None,
                 deadline_seconds: float = 0) -> None:
        """Log an attempt status change."""
        description = STEP_DESCRIPTIONS.get(status, status)
        where = str(coordinate) if coordinate is not None else "-"
        line = (
            f"{ORANGE}{self._now_ms()} | ACCOUNT: {self._who():13} | STEP     | "
            f"{status:21} | {where:8} | {description} | "
            f"FALLBACK: {self._deadline(deadline_seconds)}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_sent(self, function_name: str, tx_hash: str, value_wei: int = 0) -> None:
        """Log a broadcast transaction."""
        display = FUNCTION_DISPLAY_NAMES.get(function_name, function_name)
        line = (
            f"{GREEN}{self._now()} | ACCOUNT: {self._who():13} | SENT     | "
            f"{display:21} | VALUE: {format_ether(value_wei)} ETH | TX: {tx_hash}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_received(self, event_name: str, game_id: Optional[int] = None,
                     subject: Optional[str] = None) -> None:
        """Log a decoded contract event."""
        who = format_address(subject) if subject else "-"
        gid = "-" if game_id is None else str(game_id)
        line = (
            f"{GREEN}{self._now()} | ACCOUNT: {self._who():13} | RECEIVED | "
            f"{event_name:21} | GAME-ID: {gid:5} | FROM: {who}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_outcome(self, description: str) -> None:
        """Log a terminal outcome banner."""
        line = f"{ORANGE}{self._now()} | ACCOUNT: {self._who():13} | OUTCOME  | {description}{RESET}"
        print(line, file=sys.stdout)

    def log_error(self, description: str) -> None:
        """Log an error."""
        line = f"{RED}[ERROR] {self._now()} | {description}{RESET}"
        print(line, file=sys.stderr)


# Global singleton instance
_attempt_logger: Optional[AttemptLogger] = None


def get_attempt_logger() -> AttemptLogger:
    """Get or create the global attempt logger instance."""
    global _attempt_logger
    if _attempt_logger is None:
        _attempt_logger = AttemptLogger()
    return _attempt_logger
