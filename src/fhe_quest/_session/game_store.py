# Area: Session
"""
fhe_quest._session.game_store — Game session store
==================================================

Holds the client's view of the current game and the player's stats.

Refresh sources, in order of importance:
1. Event-driven: the resolver and event handlers call ``request_refresh``
   after anything that changes on-chain state.
2. Safety net: a full re-fetch every ``refresh_interval`` seconds.

The countdown is local. ``tick`` recomputes the remaining time from the
game's start and duration without touching the ledger, and marks the
game inactive as soon as it reaches zero, without waiting for the chain.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from ..types import GameSession, PlayerStats, same_address

logger = logging.getLogger("fhe_quest.session.store")

DEFAULT_REFRESH_INTERVAL = 10.0


class GameSessionStore:
    """
    Authoritative client view of the current game.

    Attributes:
        game: Latest game snapshot, or None before the first refresh
        player_stats: Latest stats for the connected player
        attempt_fee: Per-search fee in wei
        is_active: Derived active flag (live on chain and not expired locally)
        is_creator: True when the connected player owns the contract
        remaining_seconds: Local countdown value
        displayed_wrong_attempts: Wrong attempt count shown to the player
    """

    def __init__(self, ledger, player_address: str,
                 refresh_interval: float = DEFAULT_REFRESH_INTERVAL):
        self._ledger = ledger
        self.player_address = player_address
        self.refresh_interval = refresh_interval

        self.game: Optional[GameSession] = None
        self.player_stats: Optional[PlayerStats] = None
        self.attempt_fee: int = 0
        self.is_active = False
        self.is_creator = False
        self.remaining_seconds = 0
        self.displayed_wrong_attempts = 0

        self._last_refresh: Optional[float] = None
        self._refresh_requested = True
        self._new_game_listeners: List[Callable[[GameSession], None]] = []

    def on_new_game(self, listener: Callable[[GameSession], None]) -> None:
        """Register a listener called when a different game id is observed."""
        self._new_game_listeners.append(listener)

    def refresh(self) -> GameSession:
        """Re-fetch game stats, player stats, attempt fee and owner."""
        game = self._ledger.get_game_stats()
        stats = self._ledger.get_player_stats(self.player_address)
        fee = self._ledger.get_attempt_fee()
        owner = self._ledger.owner()

        previous = self.game
        self.game = game
        self.player_stats = stats
        self.attempt_fee = fee
        self.is_creator = same_address(owner, self.player_address)
        self.displayed_wrong_attempts = stats.wrong_attempts
        self.is_active = game.is_live
        self._update_remaining(time.time())

        self._last_refresh = time.monotonic()
        self._refresh_requested = False

        logger.debug(
            "Refreshed game %s: active=%s remaining=%ss fee=%s wrong=%s",
            game.id, self.is_active, self.remaining_seconds, fee, stats.wrong_attempts,
        )

        if previous is not None and previous.id != game.id:
            logger.info("New game detected: %s -> %s", previous.id, game.id)
            for listener in self._new_game_listeners:
                listener(game)
        return game

    def tick(self) -> int:
        """Recompute the countdown locally. Returns the remaining seconds."""
        if self.game is not None and self.is_active:
            self._update_remaining(time.time())
        return self.remaining_seconds

    def _update_remaining(self, now: float) -> None:
        if self.game is None or not self.game.is_live:
            self.remaining_seconds = 0
            return
        self.remaining_seconds = max(0, int(self.game.end_time - now))
        if self.remaining_seconds == 0 and self.is_active:
            self.is_active = False
            logger.info("Game %s time is up", self.game.id)

    def needs_refresh(self) -> bool:
        """True if a refresh was requested or the safety-net interval elapsed."""
        if self._refresh_requested or self._last_refresh is None:
            return True
        return time.monotonic() - self._last_refresh >= self.refresh_interval

    def request_refresh(self) -> None:
        """Ask for a refresh on the next poll."""
        self._refresh_requested = True

    def mark_inactive(self) -> None:
        """Mark the game over ahead of the next refresh."""
        if self.is_active:
            logger.info("Game marked inactive")
        self.is_active = False
        self.remaining_seconds = 0

    def note_wrong_attempt(self) -> None:
        """Bump the displayed wrong attempt count until the next refresh re-syncs it."""
        self.displayed_wrong_attempts += 1
