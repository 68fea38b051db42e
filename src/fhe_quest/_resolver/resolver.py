# Area: Resolver
"""
fhe_quest._resolver.resolver — Search attempt resolver
======================================================

Drives one search attempt from selection to its terminal outcome:

    select(x, y) -> start() -> encrypt -> submit -> confirm -> await oracle

Once the search transaction is confirmed two sources race to end the
attempt: a matching contract event, or the local fallback timer. Each
attempt carries a single-use ``resolved`` guard, so whichever source
arrives first wins and the other becomes a no-op.

Correlation caveat
------------------
The contract's events carry no attempt identifier. An event is
attributed to the pending attempt when its player (or winner) equals the
connected account, case-insensitively. A late event for an attempt that
already timed out can therefore be credited to the next attempt if that
one is already waiting on the oracle.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import (
    AttemptAlreadyPending,
    AttemptCancelled,
    FheQuestError,
    GameNotActive,
    OracleTimeout,
    classify_error,
)
from ..types import GRID_SIZE, Coordinate, EncryptedCoordinates, Outcome, OutcomeKind, same_address
from .._ledger.events import (
    AttemptMade,
    DecryptionCompleted,
    GameCompleted,
    TreasureFound,
    WrongAttemptRecorded,
)
from .._shared.attempt_logger import AttemptLogger, get_attempt_logger
from .._shared.logging_config import log_failure
from .enums import AttemptEvent, AttemptStatus
from .fallback_timer import DEFAULT_FALLBACK_SECONDS, FallbackTimer
from .state_machine import AttemptStateMachine

logger = logging.getLogger("fhe_quest.resolver")

OutcomeListener = Callable[[Outcome], None]


def _reported_coordinate(event: TreasureFound, fallback: Coordinate) -> Coordinate:
    """Treasure location from the event, or ``fallback`` if it is off the grid."""
    if 0 <= event.x < GRID_SIZE and 0 <= event.y < GRID_SIZE:
        return Coordinate(event.x, event.y)
    return fallback


@dataclass
class SearchAttempt:
    """
    One guess by one player.

    Attributes:
        player: Address of the searching player
        coordinate: Guessed cell
        encrypted: Ciphertext handles and proofs, once encrypted
        tx_hash: Search transaction hash, once broadcast
        submitted_at: Unix time the search was confirmed
        outcome: Terminal outcome, once resolved
        resolved: Single-use guard; set by whichever source ends the attempt
    """

    player: str
    coordinate: Coordinate
    encrypted: Optional[EncryptedCoordinates] = None
    tx_hash: Optional[str] = None
    submitted_at: Optional[float] = None
    outcome: Optional[Outcome] = None
    resolved: bool = False
    state_machine: AttemptStateMachine = field(default_factory=AttemptStateMachine)

    @property
    def status(self) -> AttemptStatus:
        return self.state_machine.current_status

    @property
    def is_terminal(self) -> bool:
        return self.state_machine.is_terminal


class SearchAttemptResolver:
    """
    State machine owner for the player's search attempts.

    The current attempt's status is the only "search in flight" flag:
    the resolver is busy from ``start()`` until the attempt is terminal.
    """

    def __init__(
        self,
        session,
        store,
        grid,
        fallback_seconds: float = DEFAULT_FALLBACK_SECONDS,
        attempt_logger: Optional[AttemptLogger] = None,
    ):
        self._session = session
        self._store = store
        self._grid = grid
        self.fallback_seconds = fallback_seconds
        self._timer = FallbackTimer()
        self._attempt: Optional[SearchAttempt] = None
        self._listeners: List[OutcomeListener] = []
        self._log = attempt_logger or get_attempt_logger()

    # ── Introspection ────────────────────────────────────────────

    @property
    def attempt(self) -> Optional[SearchAttempt]:
        return self._attempt

    @property
    def status(self) -> Optional[AttemptStatus]:
        return self._attempt.status if self._attempt else None

    @property
    def is_busy(self) -> bool:
        """True from start() until the current attempt is terminal."""
        attempt = self._attempt
        if attempt is None:
            return False
        return attempt.status is not AttemptStatus.SELECTED and not attempt.is_terminal

    @property
    def is_idle(self) -> bool:
        return not self.is_busy

    @property
    def timer(self) -> FallbackTimer:
        return self._timer

    def add_listener(self, listener: OutcomeListener) -> None:
        """Register a callable receiving every terminal outcome."""
        self._listeners.append(listener)

    def register(self, dispatcher) -> None:
        """Subscribe the resolver's event handlers on a dispatcher."""
        dispatcher.register(WrongAttemptRecorded, self.on_wrong_attempt_recorded)
        dispatcher.register(AttemptMade, self.on_decryption_result)
        dispatcher.register(DecryptionCompleted, self.on_decryption_result)
        dispatcher.register(TreasureFound, self.on_treasure_found)
        dispatcher.register(GameCompleted, self.on_game_completed)

    def handle_event(self, event) -> Optional[Outcome]:
        """Route one decoded event to its typed handler; unknown types are ignored."""
        handlers = {
            WrongAttemptRecorded: self.on_wrong_attempt_recorded,
            AttemptMade: self.on_decryption_result,
            DecryptionCompleted: self.on_decryption_result,
            TreasureFound: self.on_treasure_found,
            GameCompleted: self.on_game_completed,
        }
        handler = handlers.get(type(event))
        return handler(event) if handler else None

    # ── Selection and submission ─────────────────────────────────

    def select(self, x: int, y: int) -> Coordinate:
        """
        Select the cell for the next search.

        Raises:
            AttemptAlreadyPending: If a search is in flight
            ValueError: If the coordinate is off the grid
        """
        if self.is_busy:
            raise AttemptAlreadyPending("A search is already in progress")
        coordinate = Coordinate(x, y)
        self._attempt = SearchAttempt(player=self._session.account, coordinate=coordinate)
        self._log.log_step(AttemptStatus.SELECTED.value, coordinate)
        return coordinate

    def start(self) -> Optional[Outcome]:
        """
        Encrypt, submit and confirm the selected search.

        Returns:
            None once the attempt is waiting on the oracle, or a FAILED
            outcome if encryption, submission or confirmation failed

        Raises:
            AttemptAlreadyPending: If a search is in flight locally or the
                contract still has a decryption pending (no state change)
            GameNotActive: If there is no live game (no state change)
            ValueError: If nothing is selected
        """
        if self.is_busy:
            raise AttemptAlreadyPending("A search is already in progress")
        attempt = self._attempt
        if attempt is None or attempt.status is not AttemptStatus.SELECTED:
            raise ValueError("Select a coordinate before searching")
        if not self._store.is_active:
            raise GameNotActive("Game is not active")

        ledger = self._session.ledger
        try:
            pending = ledger.is_decryption_pending()
        except Exception as exc:
            return self._fail(attempt, classify_error(exc))
        if pending:
            raise AttemptAlreadyPending(
                "Previous search is still being decrypted; wait for its result"
            )

        finished = False
        try:
            self._advance(attempt, AttemptEvent.START)
            attempt.encrypted = self._session.gateway.encrypt_coordinates(
                self._session.contract_address,
                attempt.player,
                attempt.coordinate.x,
                attempt.coordinate.y,
            )
            self._advance(attempt, AttemptEvent.ENCRYPTED)

            fee = self._store.attempt_fee
            tx = ledger.submit_search(
                attempt.encrypted.x.handle,
                attempt.encrypted.y.handle,
                attempt.encrypted.x.proof,
                attempt.encrypted.y.proof,
                fee,
            )
            attempt.tx_hash = tx.tx_hash
            self._log.log_sent("searchTreasure", tx.tx_hash, fee)
            self._advance(attempt, AttemptEvent.BROADCAST)

            tx.await_confirmation()
            attempt.submitted_at = time.time()
            self._timer.arm(self.fallback_seconds)
            self._advance(attempt, AttemptEvent.CONFIRMED)
            finished = True
        except Exception as exc:
            finished = True
            return self._fail(attempt, classify_error(exc))
        finally:
            if not finished:
                self._fail(attempt, AttemptCancelled("Search interrupted"))

        self._store.request_refresh()
        return None

    # ── Race branch 1: contract events ───────────────────────────

    def on_wrong_attempt_recorded(self, event: WrongAttemptRecorded) -> Optional[Outcome]:
        if not self._matches(event.player):
            return None
        return self._resolve(Outcome(OutcomeKind.WRONG_ATTEMPT, self._attempt.coordinate))

    def on_decryption_result(self, event) -> Optional[Outcome]:
        """Handle AttemptMade and DecryptionCompleted, which share a shape."""
        if not self._matches(event.player):
            return None
        coordinate = self._attempt.coordinate
        if event.is_correct:
            outcome = Outcome(OutcomeKind.TREASURE_FOUND, coordinate, winner=event.player)
        else:
            outcome = Outcome(OutcomeKind.WRONG_ATTEMPT, coordinate)
        return self._resolve(outcome)

    def on_treasure_found(self, event: TreasureFound) -> Optional[Outcome]:
        if not self._matches(event.winner):
            return None
        return self._resolve(Outcome(
            OutcomeKind.TREASURE_FOUND,
            _reported_coordinate(event, self._attempt.coordinate),
            amount=event.amount,
            winner=event.winner,
        ))

    def on_game_completed(self, event: GameCompleted) -> Optional[Outcome]:
        """The game is over for everyone, so any pending attempt ends."""
        if not self._awaiting_oracle():
            return None
        return self._resolve(Outcome(
            OutcomeKind.GAME_COMPLETED,
            self._attempt.coordinate,
            amount=event.total_revenue,
            winner=event.winner,
        ))

    def _awaiting_oracle(self) -> bool:
        attempt = self._attempt
        return (
            attempt is not None
            and not attempt.resolved
            and attempt.status is AttemptStatus.AWAITING_ORACLE
        )

    def _matches(self, address: Optional[str]) -> bool:
        if not self._awaiting_oracle():
            return False
        if not same_address(address, self._session.account):
            logger.debug("Event for %s is not for the current player, ignoring", address)
            return False
        return True

    def _resolve(self, outcome: Outcome) -> Optional[Outcome]:
        attempt = self._attempt
        if attempt is None or attempt.resolved:
            return None
        attempt.resolved = True
        self._timer.cancel()
        self._advance(attempt, AttemptEvent.ORACLE_RESULT)
        return self._finish(attempt, outcome)

    # ── Race branch 2: fallback timer ────────────────────────────

    def check_fallback(self) -> Optional[Outcome]:
        """
        Fire the fallback if it expired before any matching event.

        The synthesized WRONG_ATTEMPT is best effort: the contract may
        still report a different result later.
        """
        if not self._awaiting_oracle() or not self._timer.expired():
            return None

        attempt = self._attempt
        attempt.resolved = True
        self._timer.cancel()
        self._advance(attempt, AttemptEvent.TIMER_FIRED)

        error = OracleTimeout(
            self.fallback_seconds,
            {"coordinate": str(attempt.coordinate), "tx_hash": attempt.tx_hash},
        )
        logger.warning(str(error))
        return self._finish(attempt, Outcome(
            OutcomeKind.WRONG_ATTEMPT,
            attempt.coordinate,
            error=error,
            best_effort=True,
        ))

    # ── Failure and cancellation ─────────────────────────────────

    def cancel(self, reason: str = "Session invalidated") -> Optional[Outcome]:
        """
        Abandon the current attempt.

        An in-flight attempt ends FAILED with ``AttemptCancelled``; a bare
        selection is dropped.
        """
        self._timer.cancel()
        attempt = self._attempt
        if attempt is None or attempt.is_terminal:
            return None
        if attempt.status is AttemptStatus.SELECTED:
            self._attempt = None
            return None
        return self._fail(attempt, AttemptCancelled(reason))

    def _fail(self, attempt: SearchAttempt, error: FheQuestError) -> Outcome:
        self._timer.cancel()
        attempt.resolved = True
        self._advance(attempt, AttemptEvent.FAIL)
        return self._finish(attempt, Outcome(
            OutcomeKind.FAILED, attempt.coordinate, error=error
        ))

    # ── Shared terminal path ─────────────────────────────────────

    def _advance(self, attempt: SearchAttempt, event: AttemptEvent) -> AttemptStatus:
        status = attempt.state_machine.transition(event)
        deadline = self.fallback_seconds if status is AttemptStatus.AWAITING_ORACLE else 0
        self._log.log_step(status.value, attempt.coordinate, deadline_seconds=deadline)
        return status

    def _finish(self, attempt: SearchAttempt, outcome: Outcome) -> Outcome:
        attempt.outcome = outcome

        if outcome.kind is OutcomeKind.WRONG_ATTEMPT:
            self._grid.mark_wrong(attempt.coordinate)
            self._store.note_wrong_attempt()
        elif outcome.kind in (OutcomeKind.TREASURE_FOUND, OutcomeKind.GAME_COMPLETED):
            self._store.mark_inactive()

        if outcome.is_failure:
            log_failure(outcome.error)
        else:
            self._store.request_refresh()
            logger.info("Attempt at %s resolved: %s", attempt.coordinate, outcome.kind.value)

        self._log.log_outcome(outcome.describe())
        for listener in self._listeners:
            try:
                listener(outcome)
            except Exception:
                logger.exception("Outcome listener failed for attempt at %s", attempt.coordinate)
        return outcome
