# Area: Resolver
"""
fhe_quest._resolver.enums — Attempt and creator state machine enums
===================================================================

Defines the statuses and events of a search attempt, and the states of
the game creator flow.
"""

from enum import Enum


class AttemptStatus(Enum):
    """
    Status of a single search attempt.

    State transitions:
    SELECTED -> ENCRYPTING (on START)
    ENCRYPTING -> SUBMITTING (on ENCRYPTED)
    SUBMITTING -> AWAITING_CONFIRMATION (on BROADCAST)
    AWAITING_CONFIRMATION -> AWAITING_ORACLE (on CONFIRMED)
    AWAITING_ORACLE -> RESOLVED (on ORACLE_RESULT)
    AWAITING_ORACLE -> TIMED_OUT (on TIMER_FIRED)
    Any non-terminal state -> FAILED (on FAIL)
    """
    SELECTED = "SELECTED"
    ENCRYPTING = "ENCRYPTING"
    SUBMITTING = "SUBMITTING"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"
    AWAITING_ORACLE = "AWAITING_ORACLE"
    RESOLVED = "RESOLVED"
    TIMED_OUT = "TIMED_OUT"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    AttemptStatus.RESOLVED,
    AttemptStatus.TIMED_OUT,
    AttemptStatus.FAILED,
})


class AttemptEvent(Enum):
    """
    Events that advance a search attempt.

    Events are triggered by:
    - START: resolver.start() accepted the selection
    - ENCRYPTED: both coordinates came back from the relayer
    - BROADCAST: the search transaction was sent
    - CONFIRMED: the search transaction was mined successfully
    - ORACLE_RESULT: a matching contract event arrived
    - TIMER_FIRED: the fallback timer expired first
    - FAIL: any classified failure, or cancellation
    """
    START = "START"
    ENCRYPTED = "ENCRYPTED"
    BROADCAST = "BROADCAST"
    CONFIRMED = "CONFIRMED"
    ORACLE_RESULT = "ORACLE_RESULT"
    TIMER_FIRED = "TIMER_FIRED"
    FAIL = "FAIL"


class CreatorState(Enum):
    """
    States of the game creator flow.

    IDLE -> COORDINATES_ENCRYPTED (treasure location encrypted)
    COORDINATES_ENCRYPTED -> GAME_CREATED (createGame confirmed)
    """
    IDLE = "IDLE"
    COORDINATES_ENCRYPTED = "COORDINATES_ENCRYPTED"
    GAME_CREATED = "GAME_CREATED"
