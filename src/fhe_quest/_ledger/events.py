# Area: Ledger
"""
fhe_quest._ledger.events — Decoded contract events
==================================================

Each contract event is decoded once, at the ledger boundary, into one of
five frozen dataclasses. ``LedgerEvent`` is their union; consumers
dispatch on the class, never on event-name strings.

Address fields are normalized to lowercase before anyone compares them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Union

from ..types import normalize_address


@dataclass(frozen=True)
class AttemptMade:
    """A search was evaluated for ``player``."""
    name: ClassVar[str] = "AttemptMade"

    game_id: int
    player: Optional[str]
    is_correct: bool
    block_number: int = 0
    log_index: int = 0

    @property
    def subject(self) -> Optional[str]:
        return self.player


@dataclass(frozen=True)
class TreasureFound:
    """``winner`` found the treasure at (x, y) and received ``amount`` wei."""
    name: ClassVar[str] = "TreasureFound"

    game_id: int
    winner: Optional[str]
    x: int
    y: int
    amount: int
    block_number: int = 0
    log_index: int = 0

    @property
    def subject(self) -> Optional[str]:
        return self.winner


@dataclass(frozen=True)
class GameCompleted:
    """The game ended; ``total_revenue`` wei of fees were collected."""
    name: ClassVar[str] = "GameCompleted"

    game_id: int
    winner: Optional[str]
    total_revenue: int
    block_number: int = 0
    log_index: int = 0

    @property
    def subject(self) -> Optional[str]:
        return self.winner


@dataclass(frozen=True)
class DecryptionCompleted:
    """The oracle finished comparing ``player``'s encrypted guess."""
    name: ClassVar[str] = "DecryptionCompleted"

    game_id: int
    player: Optional[str]
    is_correct: bool
    block_number: int = 0
    log_index: int = 0

    @property
    def subject(self) -> Optional[str]:
        return self.player


@dataclass(frozen=True)
class WrongAttemptRecorded:
    """``player``'s guess was wrong."""
    name: ClassVar[str] = "WrongAttemptRecorded"

    player: Optional[str]
    game_id: int
    block_number: int = 0
    log_index: int = 0

    @property
    def subject(self) -> Optional[str]:
        return self.player


LedgerEvent = Union[
    AttemptMade, TreasureFound, GameCompleted, DecryptionCompleted, WrongAttemptRecorded
]


def _attempt_made(args: Mapping[str, Any], block: int, index: int) -> AttemptMade:
    return AttemptMade(
        game_id=int(args["gameId"]),
        player=normalize_address(args["player"]),
        is_correct=bool(args["isCorrect"]),
        block_number=block,
        log_index=index,
    )


def _treasure_found(args: Mapping[str, Any], block: int, index: int) -> TreasureFound:
    return TreasureFound(
        game_id=int(args["gameId"]),
        winner=normalize_address(args["winner"]),
        x=int(args["x"]),
        y=int(args["y"]),
        amount=int(args["amount"]),
        block_number=block,
        log_index=index,
    )


def _game_completed(args: Mapping[str, Any], block: int, index: int) -> GameCompleted:
    return GameCompleted(
        game_id=int(args["gameId"]),
        winner=normalize_address(args["winner"]),
        total_revenue=int(args["totalRevenue"]),
        block_number=block,
        log_index=index,
    )


def _decryption_completed(args: Mapping[str, Any], block: int, index: int) -> DecryptionCompleted:
    return DecryptionCompleted(
        game_id=int(args["gameId"]),
        player=normalize_address(args["player"]),
        is_correct=bool(args["isCorrect"]),
        block_number=block,
        log_index=index,
    )


def _wrong_attempt_recorded(args: Mapping[str, Any], block: int, index: int) -> WrongAttemptRecorded:
    return WrongAttemptRecorded(
        player=normalize_address(args["player"]),
        game_id=int(args["gameId"]),
        block_number=block,
        log_index=index,
    )


DECODERS: Dict[str, Callable[[Mapping[str, Any], int, int], LedgerEvent]] = {
    "AttemptMade": _attempt_made,
    "TreasureFound": _treasure_found,
    "GameCompleted": _game_completed,
    "DecryptionCompleted": _decryption_completed,
    "WrongAttemptRecorded": _wrong_attempt_recorded,
}


def decode_event(
    name: str, args: Mapping[str, Any], block_number: int = 0, log_index: int = 0
) -> LedgerEvent:
    """
    Decode raw event arguments into a typed event.

    Raises:
        KeyError: If the event name is unknown or an argument is missing
    """
    decoder = DECODERS[name]
    return decoder(args, int(block_number or 0), int(log_index or 0))
