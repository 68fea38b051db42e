"""
fhe_quest.errors — Custom exception classes
============================================

Defines the failure taxonomy for search attempts and game creation.
Every failure crossing the ledger or relayer boundary is mapped onto one
of these classes by ``classify_error`` before it reaches the caller.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
import json

from web3.exceptions import ContractLogicError, TimeExhausted


class FheQuestError(Exception):
    """Base exception for all FHE Quest client errors."""

    error_type = "FHE_QUEST_ERROR"

    def __init__(self, message: str = "", context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message or self.__class__.__doc__)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context=self.context,
        )


class UserRejected(FheQuestError):
    """Transaction signing was declined."""

    error_type = "USER_REJECTED"


class InsufficientFunds(FheQuestError):
    """Account balance does not cover value plus gas."""

    error_type = "INSUFFICIENT_FUNDS"


class TransactionReverted(FheQuestError):
    """Contract call failed (value mismatch, wrong state or ABI mismatch)."""

    error_type = "TRANSACTION_REVERTED"

    def __init__(
        self,
        message: str = "",
        tx_hash: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.tx_hash = tx_hash
        context = dict(context or {})
        if tx_hash:
            context["tx_hash"] = tx_hash
        super().__init__(message, context)


class EncryptionUnavailable(FheQuestError):
    """Encryption relayer is not initialized."""

    error_type = "ENCRYPTION_UNAVAILABLE"


class EncryptionFailure(FheQuestError):
    """Encryption relayer raised or returned a malformed response."""

    error_type = "ENCRYPTION_FAILURE"


class NetworkMismatch(FheQuestError):
    """Connected chain is not the target chain."""

    error_type = "NETWORK_MISMATCH"

    def __init__(self, actual_chain_id: int, expected_chain_id: int):
        self.actual_chain_id = actual_chain_id
        self.expected_chain_id = expected_chain_id
        super().__init__(
            f"Connected to chain {actual_chain_id}, expected {expected_chain_id}",
            {"actual_chain_id": actual_chain_id, "expected_chain_id": expected_chain_id},
        )


class AttemptAlreadyPending(FheQuestError):
    """A decryption is outstanding; a new attempt is blocked."""

    error_type = "ATTEMPT_ALREADY_PENDING"


class OracleTimeout(FheQuestError):
    """Fallback timer fired without a matching oracle event.

    The outcome attached to this error is best effort: it assumes a
    negative result without on-chain confirmation, and a late event may
    still contradict it.
    """

    error_type = "ORACLE_TIMEOUT"

    def __init__(self, timeout_seconds: float, context: Optional[Dict[str, Any]] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"No oracle result within {timeout_seconds:g}s; assuming no treasure (best effort)",
            context,
        )


class GameNotActive(FheQuestError):
    """No active game to search in."""

    error_type = "GAME_NOT_ACTIVE"


class AttemptCancelled(FheQuestError):
    """Attempt was abandoned because its session was invalidated or interrupted."""

    error_type = "ATTEMPT_CANCELLED"


class MissingEncryptedCoordinates(FheQuestError):
    """Treasure coordinates must be encrypted before creating a game."""

    error_type = "MISSING_ENCRYPTED_COORDINATES"


_REJECTION_MARKERS = ("user rejected", "user denied", "rejected by user")
_FUNDS_MARKERS = ("insufficient funds",)


def classify_error(exc: BaseException) -> FheQuestError:
    """
    Map an arbitrary failure onto the error taxonomy.

    Already-classified errors pass through untouched. Web3 contract
    reverts become ``TransactionReverted``; JSON-RPC error payloads and
    messages are inspected for rejection and funding problems. Anything
    else is reported as a reverted transaction carrying the original
    message.
    """
    if isinstance(exc, FheQuestError):
        return exc

    code, message = _rpc_error_details(exc)
    lowered = message.lower()

    if code == 4001 or any(marker in lowered for marker in _REJECTION_MARKERS):
        return UserRejected("Transaction rejected by user", {"detail": message})
    if any(marker in lowered for marker in _FUNDS_MARKERS):
        return InsufficientFunds("Insufficient ETH balance", {"detail": message})
    if isinstance(exc, ContractLogicError):
        return TransactionReverted(
            "Contract call failed - check encrypted data format and contract compatibility",
            context={"detail": message},
        )
    if isinstance(exc, TimeExhausted):
        return TransactionReverted(
            "Transaction was not mined in time", context={"detail": message}
        )
    return TransactionReverted(message or exc.__class__.__name__, context={"detail": message})


def _rpc_error_details(exc: BaseException) -> Tuple[Optional[int], str]:
    """Extract (code, message) from a JSON-RPC style error, if present."""
    rpc_response = getattr(exc, "rpc_response", None)
    if isinstance(rpc_response, dict) and isinstance(rpc_response.get("error"), dict):
        error = rpc_response["error"]
        return error.get("code"), str(error.get("message", ""))
    if exc.args and isinstance(exc.args[0], dict):
        payload = exc.args[0]
        return payload.get("code"), str(payload.get("message", ""))
    return getattr(exc, "code", None), str(exc)


def _format_error_block(
    error_type: str,
    message: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for the terminal and the log file."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " FHE QUEST ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
