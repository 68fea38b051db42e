"""
fhe_quest.runner — Polling game runner
======================================

Owns the connected game and drives it from a single-threaded loop.

Each poll iteration:
1. Fetch new contract events and dispatch them (oracle results first)
2. Fire the fallback timer if it expired without a matching event
3. Tick the local countdown
4. Refresh the game store when requested or when the safety-net
   interval elapsed, checking the chain id on the way

Everything bound to an (account, chain) connection lives in one
``ActiveGame`` that is replaced as a unit, never field by field.
"""

from __future__ import annotations

import logging
import signal
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from .errors import NetworkMismatch
from .types import Outcome
from ._gateway import RelayerInstance
from ._ledger import (
    AttemptMade,
    DecryptionCompleted,
    EventDispatcher,
    EventStream,
    GameCompleted,
    TreasureFound,
    WrongAttemptRecorded,
)
from ._resolver import CreatorFlow, SearchAttemptResolver
from ._runner_config import QuestConfig, validate_config
from ._session import GameSessionStore, GridState, Session, check_network, open_session
from ._shared import (
    disable_lifecycle_mode,
    enable_lifecycle_mode,
    get_attempt_logger,
    setup_logging,
)

logger = logging.getLogger("fhe_quest")

EVENT_TYPES = (
    AttemptMade,
    TreasureFound,
    GameCompleted,
    DecryptionCompleted,
    WrongAttemptRecorded,
)


@dataclass(frozen=True)
class ActiveGame:
    """Everything bound to one connected session."""

    session: Session
    store: GameSessionStore
    grid: GridState
    resolver: SearchAttemptResolver
    creator: CreatorFlow
    events: EventStream
    dispatcher: EventDispatcher


class QuestRunner:
    """
    Connects a player to the treasure hunt contract and runs the loop.

    Args:
        config: QuestConfig or a dict validated into one
        relayer: FHE relayer instance used for encryption
        network_switcher: Called with the target chain id when the
            provider is on the wrong chain
        w3: Pre-built Web3 instance (defaults to an HTTP provider on rpc_url)
    """

    def __init__(
        self,
        config: Union[QuestConfig, Dict[str, Any]],
        relayer: Optional[RelayerInstance] = None,
        network_switcher: Optional[Callable[[int], None]] = None,
        w3: Optional[Web3] = None,
    ):
        self.config = config if isinstance(config, QuestConfig) else validate_config(config)
        self.relayer = relayer
        self.network_switcher = network_switcher
        self._running = False
        self._game: Optional[ActiveGame] = None
        self._account: Optional[LocalAccount] = None
        self._outcome_listeners: List[Callable[[Outcome], None]] = []

        setup_logging(log_file_path=self.config.log_file)

        self.w3 = w3 or Web3(Web3.HTTPProvider(self.config.rpc_url))
        self.poll_interval = self.config.poll_interval_seconds

        # Lifecycle lines replace standard logs on the terminal
        enable_lifecycle_mode()
        self._attempt_logger = get_attempt_logger()

    # ── Session management ───────────────────────────────────────

    @property
    def game(self) -> Optional[ActiveGame]:
        return self._game

    def add_outcome_listener(self, listener: Callable[[Outcome], None]) -> None:
        """Receive terminal outcomes of this and every future session."""
        self._outcome_listeners.append(listener)
        if self._game is not None:
            self._game.resolver.add_listener(listener)

    def connect(self, private_key: Optional[str] = None) -> ActiveGame:
        """
        Open a session for the given key (or the configured one).

        Raises:
            ValueError: If no private key is available
            NetworkMismatch: If the provider is on another chain
        """
        key = private_key
        if key is None and self.config.private_key is not None:
            key = self.config.private_key.get_secret_value()
        if not key:
            raise ValueError("A private key is required to connect")
        return self._connect_account(Account.from_key(key))

    def switch_account(self, private_key: str) -> ActiveGame:
        """Replace the whole session with one for another account."""
        return self.connect(private_key)

    def _connect_account(self, account: LocalAccount) -> ActiveGame:
        self._account = account
        try:
            session = open_session(
                self.w3,
                account,
                self.config.contract_address,
                self.config.chain_id,
                relayer=self.relayer,
                search_gas_limit=self.config.search_gas_limit,
                create_gas_limit=self.config.create_gas_limit,
                confirmation_timeout=self.config.confirmation_timeout_seconds,
            )
        except NetworkMismatch:
            self.invalidate("Wrong network")
            self._request_network_switch()
            raise

        game = self._build_game(session)
        self._replace_game(game)
        game.store.refresh()
        return game

    def _build_game(self, session: Session) -> ActiveGame:
        store = GameSessionStore(
            session.ledger,
            session.account,
            refresh_interval=self.config.refresh_interval_seconds,
        )
        grid = GridState()
        store.on_new_game(lambda _game: grid.reset())

        resolver = SearchAttemptResolver(
            session,
            store,
            grid,
            fallback_seconds=self.config.fallback_timeout_seconds,
            attempt_logger=self._attempt_logger,
        )
        for listener in self._outcome_listeners:
            resolver.add_listener(listener)

        dispatcher = EventDispatcher()
        for event_type in EVENT_TYPES:
            dispatcher.register(event_type, self._log_event)
        resolver.register(dispatcher)

        def refresh_on_game_change(_event) -> None:
            store.request_refresh()

        dispatcher.register(TreasureFound, refresh_on_game_change)
        dispatcher.register(GameCompleted, refresh_on_game_change)

        return ActiveGame(
            session=session,
            store=store,
            grid=grid,
            resolver=resolver,
            creator=CreatorFlow(session, store, attempt_logger=self._attempt_logger),
            events=session.ledger.open_event_stream(),
            dispatcher=dispatcher,
        )

    def _replace_game(self, game: Optional[ActiveGame]) -> None:
        old = self._game
        if old is not None:
            old.resolver.cancel("Session replaced")
        self._game = game
        self._attempt_logger.set_account(game.session.account if game else None)

    def invalidate(self, reason: str = "Session invalidated") -> None:
        """Drop the whole session, cancelling any attempt in flight."""
        if self._game is not None:
            logger.info(f"Invalidating session: {reason}")
        self._replace_game(None)

    def on_chain_changed(self, chain_id: int) -> Optional[ActiveGame]:
        """
        React to the provider switching chains.

        On the wrong chain the session is dropped and the network switcher
        is asked to move back. On the right chain a dropped session is
        reopened for the last account.
        """
        try:
            check_network(chain_id, self.config.chain_id)
        except NetworkMismatch:
            self.invalidate("Network changed")
            self._request_network_switch()
            raise

        if self._game is None and self._account is not None:
            return self._connect_account(self._account)
        return self._game

    def _request_network_switch(self) -> None:
        if self.network_switcher is not None:
            logger.info(f"Requesting switch to chain {self.config.chain_id}")
            self.network_switcher(self.config.chain_id)

    def _require_game(self) -> ActiveGame:
        if self._game is None:
            raise RuntimeError("Not connected; call connect() first")
        return self._game

    # ── Player and creator actions ───────────────────────────────

    def search(self, x: int, y: int) -> Optional[Outcome]:
        """Select (x, y) and submit the search. See SearchAttemptResolver.start."""
        game = self._require_game()
        game.resolver.select(x, y)
        return game.resolver.start()

    def create_game(self, x: int, y: int, treasure_wei: int, duration_seconds: int) -> str:
        """Encrypt the treasure location and create a game. Returns the tx hash."""
        game = self._require_game()
        game.creator.encrypt_treasure(x, y)
        return game.creator.create_game(treasure_wei, duration_seconds)

    # ── Loop ─────────────────────────────────────────────────────

    def poll_once(self) -> None:
        """Single loop iteration: events → fallback → countdown → refresh."""
        game = self._game
        if game is None:
            return

        for event in game.events.poll():
            try:
                game.dispatcher.dispatch(event)
            except Exception as e:
                logger.error(f"Handler error for {type(event).__name__}: {e}", exc_info=True)

        game.resolver.check_fallback()
        game.store.tick()

        if game.store.needs_refresh():
            self.on_chain_changed(self.w3.eth.chain_id)
            if self._game is game:
                game.store.refresh()

    def wait_for_outcome(self, timeout: Optional[float] = None) -> Optional[Outcome]:
        """Poll until the current attempt is terminal; None on timeout."""
        game = self._require_game()
        deadline = None if timeout is None else time.monotonic() + timeout

        while game.resolver.is_busy:
            if deadline is not None and time.monotonic() >= deadline:
                return None
            self.poll_once()
            if self._game is not game:
                break
            if game.resolver.is_busy:
                time.sleep(self.poll_interval)

        attempt = game.resolver.attempt
        return attempt.outcome if attempt else None

    def run(self) -> None:
        """Start the polling loop. Blocks until interrupted or stop()."""
        self._running = True
        signal.signal(signal.SIGINT, lambda s, f: setattr(self, "_running", False))

        if self._game is None:
            self.connect()
        self._log_startup()

        while self._running:
            try:
                self.poll_once()
                time.sleep(self.poll_interval)
            except KeyboardInterrupt:
                break
            except Exception as e:
                logger.error(f"Loop error: {e}", exc_info=True)
                time.sleep(self.poll_interval)

        self.invalidate("Runner stopped")
        disable_lifecycle_mode()
        logger.info("FHE Quest runner stopped.")

    def stop(self) -> None:
        """Ask run() to exit after the current iteration."""
        self._running = False

    def _log_startup(self) -> None:
        """Log startup information."""
        game = self._game
        logger.info("=" * 60)
        logger.info("  FHE Quest Runner — Starting")
        logger.info(f"  Account:  {game.session.account if game else 'not connected'}")
        logger.info(f"  Contract: {self.config.contract_address}")
        logger.info(f"  Chain:    {self.config.chain_id}")
        logger.info(f"  Poll:     every {self.poll_interval}s")
        logger.info("=" * 60)

    def _log_event(self, event) -> None:
        self._attempt_logger.log_received(
            event.name, game_id=event.game_id, subject=event.subject
        )
