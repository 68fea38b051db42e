"""
fhe_quest.types — Public value types
=====================================

Immutable values exchanged between the client and its callers:
the on-chain game snapshot, player statistics, coordinates, ciphertext
handles and the terminal outcome of a search attempt.

All types are exported from the main package:

    from fhe_quest import GameSession, Coordinate, Outcome, OutcomeKind
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from ._shared.formatting import format_address, format_ether

if TYPE_CHECKING:
    from .errors import FheQuestError

GRID_SIZE = 10
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_address(address: Optional[str]) -> Optional[str]:
    """Canonical (lowercase) form of an address; the zero address maps to None."""
    if not address:
        return None
    lowered = str(address).lower()
    if lowered == ZERO_ADDRESS:
        return None
    return lowered


def same_address(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive address comparison. Missing addresses never match."""
    if not left or not right:
        return False
    return str(left).lower() == str(right).lower()


@dataclass(frozen=True)
class Coordinate:
    """A grid cell. Both axes are integers in [0, GRID_SIZE)."""

    x: int
    y: int

    def __post_init__(self):
        for axis, value in (("x", self.x), ("y", self.y)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Coordinate {axis} must be an integer, got {value!r}")
            if not 0 <= value < GRID_SIZE:
                raise ValueError(
                    f"Coordinate {axis} must be in [0, {GRID_SIZE - 1}], got {value}"
                )

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class GameSession:
    """
    Snapshot of the contract's current game, as returned by getGameStats().

    Attributes:
        id: Game identifier
        creator: Creator address (lowercase)
        treasure_amount: Prize in wei
        duration_seconds: Game length in seconds
        start_time: Unix timestamp of game start
        is_active: Contract-side active flag
        is_completed: Contract-side completion flag
        winner: Winner address, or None while unclaimed
        total_attempts: Number of searches made
        total_revenue: Attempt fees collected, in wei
    """

    id: int
    creator: Optional[str]
    treasure_amount: int
    duration_seconds: int
    start_time: int
    is_active: bool
    is_completed: bool
    winner: Optional[str]
    total_attempts: int
    total_revenue: int

    @property
    def end_time(self) -> int:
        return self.start_time + self.duration_seconds

    @property
    def is_live(self) -> bool:
        return self.is_active and not self.is_completed


@dataclass(frozen=True)
class PlayerStats:
    """Per-player statistics, as returned by getPlayerStats()."""

    wrong_attempts: int


@dataclass(frozen=True)
class EncryptedValue:
    """Ciphertext handle and input proof, both 0x-prefixed lowercase hex."""

    handle: str
    proof: str


@dataclass(frozen=True)
class EncryptedCoordinates:
    """Independently encrypted x and y of one coordinate."""

    x: EncryptedValue
    y: EncryptedValue


class OutcomeKind(Enum):
    """Terminal result kinds of a search attempt."""
    WRONG_ATTEMPT = "WRONG_ATTEMPT"
    TREASURE_FOUND = "TREASURE_FOUND"
    GAME_COMPLETED = "GAME_COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Outcome:
    """
    Terminal value of a search attempt.

    Attributes:
        kind: What happened
        coordinate: The searched coordinate (or the treasure location
            reported by a TreasureFound event)
        amount: Prize or total revenue in wei, where the event carries one
        winner: Winner address for TREASURE_FOUND / GAME_COMPLETED
        error: Classified error for FAILED outcomes, or the OracleTimeout
            behind a best-effort WRONG_ATTEMPT
        best_effort: True when synthesized by the fallback timer rather
            than confirmed by an on-chain event
    """

    kind: OutcomeKind
    coordinate: Optional[Coordinate]
    amount: Optional[int] = None
    winner: Optional[str] = None
    error: Optional["FheQuestError"] = None
    best_effort: bool = False

    @property
    def is_failure(self) -> bool:
        return self.kind is OutcomeKind.FAILED

    def describe(self) -> str:
        """Human-readable banner for the outcome."""
        where = str(self.coordinate) if self.coordinate else "(?, ?)"
        if self.kind is OutcomeKind.WRONG_ATTEMPT:
            text = f"No treasure at {where}. Try again!"
            if self.best_effort:
                text += " (no oracle confirmation, best effort)"
            return text
        if self.kind is OutcomeKind.TREASURE_FOUND:
            if self.amount is not None:
                return f"You won! Treasure found at {where} - Prize: {format_ether(self.amount)} ETH"
            return f"Congratulations! You found the treasure at {where}!"
        if self.kind is OutcomeKind.GAME_COMPLETED:
            winner = format_address(self.winner) if self.winner else "none"
            revenue = format_ether(self.amount or 0)
            return f"Game completed! Winner: {winner} - Total Revenue: {revenue} ETH"
        return f"Search at {where} failed: {self.error}"

