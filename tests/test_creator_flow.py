# Area: Resolver Tests
"""Tests for the game creator flow."""

from unittest.mock import MagicMock, Mock

import pytest

from fhe_quest._resolver.creator_flow import CreatorFlow
from fhe_quest._resolver.enums import CreatorState
from fhe_quest.errors import (
    EncryptionUnavailable,
    InsufficientFunds,
    MissingEncryptedCoordinates,
    TransactionReverted,
)
from fhe_quest.types import Coordinate, EncryptedCoordinates, EncryptedValue

CREATOR = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TX_HASH = "0x" + "cd" * 32
ENCRYPTED = EncryptedCoordinates(
    x=EncryptedValue(handle="0x" + "07" * 32, proof="0x11"),
    y=EncryptedValue(handle="0x" + "02" * 32, proof="0x22"),
)


def make_flow():
    ledger = Mock()
    tx = Mock(tx_hash=TX_HASH)
    tx.await_confirmation.return_value = {"status": 1}
    ledger.create_game.return_value = tx
    gateway = Mock()
    gateway.encrypt_coordinates.return_value = ENCRYPTED
    session = Mock(account=CREATOR, contract_address=CONTRACT, ledger=ledger, gateway=gateway)
    store = Mock()
    flow = CreatorFlow(session, store, attempt_logger=MagicMock())
    return flow, session, store


class TestEncryptTreasure:
    """Tests for CreatorFlow.encrypt_treasure()."""

    def test_starts_idle(self):
        flow, _, _ = make_flow()
        assert flow.state is CreatorState.IDLE

    def test_encrypts_for_creator(self):
        flow, session, _ = make_flow()
        flow.encrypt_treasure(7, 2)

        session.gateway.encrypt_coordinates.assert_called_once_with(CONTRACT, CREATOR, 7, 2)
        assert flow.state is CreatorState.COORDINATES_ENCRYPTED
        assert flow.treasure == Coordinate(7, 2)
        assert flow.encrypted_x == ENCRYPTED.x
        assert flow.encrypted_y == ENCRYPTED.y

    def test_off_grid_rejected(self):
        flow, session, _ = make_flow()
        with pytest.raises(ValueError):
            flow.encrypt_treasure(10, 2)
        session.gateway.encrypt_coordinates.assert_not_called()

    def test_encryption_error_keeps_state(self):
        flow, session, _ = make_flow()
        session.gateway.encrypt_coordinates.side_effect = EncryptionUnavailable("Relayer not initialized")
        with pytest.raises(EncryptionUnavailable):
            flow.encrypt_treasure(1, 1)
        assert flow.state is CreatorState.IDLE


class TestCreateGame:
    """Tests for CreatorFlow.create_game()."""

    def test_requires_encrypted_coordinates(self):
        flow, session, _ = make_flow()
        with pytest.raises(MissingEncryptedCoordinates) as exc_info:
            flow.create_game(10 ** 18, 3600)
        assert str(exc_info.value) == "Please encrypt coordinates first"
        session.ledger.create_game.assert_not_called()

    def test_rejects_non_positive_values(self):
        flow, _, _ = make_flow()
        flow.encrypt_treasure(7, 2)
        with pytest.raises(ValueError):
            flow.create_game(0, 3600)
        with pytest.raises(ValueError):
            flow.create_game(10 ** 18, 0)

    def test_creates_game_paying_treasure(self):
        flow, session, store = make_flow()
        flow.encrypt_treasure(7, 2)

        tx_hash = flow.create_game(10 ** 18, 3600)

        session.ledger.create_game.assert_called_once_with(
            10 ** 18, 3600,
            ENCRYPTED.x.handle, ENCRYPTED.y.handle,
            ENCRYPTED.x.proof, ENCRYPTED.y.proof,
            value_wei=10 ** 18,
        )
        assert tx_hash == TX_HASH
        assert flow.tx_hash == TX_HASH
        assert flow.state is CreatorState.GAME_CREATED
        store.refresh.assert_called_once()

    def test_submission_error_is_classified(self):
        flow, session, store = make_flow()
        flow.encrypt_treasure(7, 2)
        session.ledger.create_game.side_effect = ValueError(
            {"code": -32000, "message": "insufficient funds for transfer"}
        )
        with pytest.raises(InsufficientFunds):
            flow.create_game(10 ** 18, 3600)
        assert flow.state is CreatorState.COORDINATES_ENCRYPTED
        store.refresh.assert_not_called()

    def test_revert_propagates_unchanged(self):
        flow, session, _ = make_flow()
        flow.encrypt_treasure(7, 2)
        error = TransactionReverted("Transaction failed", tx_hash=TX_HASH)
        session.ledger.create_game.return_value.await_confirmation.side_effect = error

        with pytest.raises(TransactionReverted) as exc_info:
            flow.create_game(10 ** 18, 3600)
        assert exc_info.value is error
