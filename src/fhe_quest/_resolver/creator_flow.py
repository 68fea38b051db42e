# Area: Resolver
"""
fhe_quest._resolver.creator_flow — Game creation flow
=====================================================

IDLE -> COORDINATES_ENCRYPTED -> GAME_CREATED

The creator encrypts the treasure location first, then creates the game
paying the treasure amount. Creating without both encrypted halves is
rejected before anything is sent.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import MissingEncryptedCoordinates, classify_error
from ..types import Coordinate, EncryptedValue
from .._shared.attempt_logger import AttemptLogger, get_attempt_logger
from .._shared.logging_config import log_failure
from .enums import CreatorState

logger = logging.getLogger("fhe_quest.resolver.creator")


class CreatorFlow:
    """
    Secondary state machine for the game creator.

    Attributes:
        state: Current CreatorState
        treasure: Plain treasure coordinate, once chosen
        encrypted_x: Encrypted x of the treasure
        encrypted_y: Encrypted y of the treasure
        tx_hash: createGame transaction hash, once sent
    """

    def __init__(self, session, store, attempt_logger: Optional[AttemptLogger] = None):
        self._session = session
        self._store = store
        self._log = attempt_logger or get_attempt_logger()
        self.state = CreatorState.IDLE
        self.treasure: Optional[Coordinate] = None
        self.encrypted_x: Optional[EncryptedValue] = None
        self.encrypted_y: Optional[EncryptedValue] = None
        self.tx_hash: Optional[str] = None

    def encrypt_treasure(self, x: int, y: int) -> None:
        """
        Encrypt the treasure location for this contract and creator.

        Re-encrypting replaces the previous pair. Encryption errors
        propagate unchanged and leave the previous pair in place.
        """
        coordinate = Coordinate(x, y)
        encrypted = self._session.gateway.encrypt_coordinates(
            self._session.contract_address, self._session.account, x, y
        )
        self.treasure = coordinate
        self.encrypted_x = encrypted.x
        self.encrypted_y = encrypted.y
        self.state = CreatorState.COORDINATES_ENCRYPTED
        logger.info("Treasure location encrypted")

    def create_game(self, treasure_wei: int, duration_seconds: int) -> str:
        """
        Create a game with the encrypted treasure location.

        Args:
            treasure_wei: Prize, sent as the transaction value
            duration_seconds: Game length

        Returns:
            The confirmed transaction hash

        Raises:
            MissingEncryptedCoordinates: If either half is not encrypted
            ValueError: If amount or duration is not positive
            FheQuestError: Classified submission or confirmation failure
        """
        if self.encrypted_x is None or self.encrypted_y is None:
            raise MissingEncryptedCoordinates("Please encrypt coordinates first")
        if treasure_wei <= 0:
            raise ValueError("Treasure amount must be positive")
        if duration_seconds <= 0:
            raise ValueError("Game duration must be positive")

        try:
            tx = self._session.ledger.create_game(
                treasure_wei,
                duration_seconds,
                self.encrypted_x.handle,
                self.encrypted_y.handle,
                self.encrypted_x.proof,
                self.encrypted_y.proof,
                value_wei=treasure_wei,
            )
            self._log.log_sent("createGame", tx.tx_hash, treasure_wei)
            tx.await_confirmation()
        except Exception as exc:
            error = classify_error(exc)
            log_failure(error)
            if error is exc:
                raise
            raise error from exc

        self.tx_hash = tx.tx_hash
        self.state = CreatorState.GAME_CREATED
        logger.info("Game created (tx %s)", tx.tx_hash)
        self._store.refresh()
        return tx.tx_hash
