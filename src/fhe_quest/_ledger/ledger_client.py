# Area: Ledger
"""
fhe_quest._ledger.ledger_client — Typed contract façade
=======================================================

Thin wrapper around the treasure hunt contract: typed reads, signed
payable writes returning a ``PendingTransaction``, and the event stream.
No game logic lives here. Every web3 failure is classified into the
error taxonomy before it leaves this module.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..errors import TransactionReverted, classify_error
from ..types import GameSession, PlayerStats, normalize_address
from .abi import CONTRACT_ABI
from .event_stream import EventStream

logger = logging.getLogger("fhe_quest.ledger")

DEFAULT_SEARCH_GAS_LIMIT = 500_000
DEFAULT_CREATE_GAS_LIMIT = 1_000_000
DEFAULT_CONFIRMATION_TIMEOUT = 180


class PendingTransaction:
    """A broadcast transaction that may still be waiting to be mined."""

    def __init__(self, w3: Web3, tx_hash: Any, function_name: str,
                 timeout: float = DEFAULT_CONFIRMATION_TIMEOUT):
        self._w3 = w3
        self.tx_hash = Web3.to_hex(tx_hash)
        self.function_name = function_name
        self.timeout = timeout

    def await_confirmation(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Block until the transaction is mined.

        Returns:
            The transaction receipt

        Raises:
            TransactionReverted: If the receipt status is not success, or
                the transaction is not mined before the timeout
        """
        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                self.tx_hash, timeout=timeout or self.timeout
            )
        except Exception as exc:
            raise classify_error(exc) from exc

        if receipt.get("status") != 1:
            raise TransactionReverted(
                "Transaction failed - check contract requirements",
                tx_hash=self.tx_hash,
                context={"function": self.function_name},
            )
        logger.info(
            "%s confirmed in block %s (tx %s)",
            self.function_name, receipt.get("blockNumber"), self.tx_hash,
        )
        return receipt


class LedgerClient:
    """
    Typed façade over the treasure hunt contract.

    Attributes:
        w3: Connected Web3 instance
        account: Local signing account of the player
        contract_address: Checksummed contract address
        contract: web3 contract object
    """

    def __init__(
        self,
        w3: Web3,
        contract_address: str,
        account: LocalAccount,
        search_gas_limit: int = DEFAULT_SEARCH_GAS_LIMIT,
        create_gas_limit: int = DEFAULT_CREATE_GAS_LIMIT,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
    ):
        self.w3 = w3
        self.account = account
        self.contract_address = Web3.to_checksum_address(contract_address)
        self.contract = w3.eth.contract(address=self.contract_address, abi=CONTRACT_ABI)
        self.search_gas_limit = search_gas_limit
        self.create_gas_limit = create_gas_limit
        self.confirmation_timeout = confirmation_timeout

    @property
    def player_address(self) -> str:
        return self.account.address

    # ── Reads ────────────────────────────────────────────────────

    def _call(self, function_name: str, *args: Any, sender: Optional[str] = None) -> Any:
        fn = getattr(self.contract.functions, function_name)(*args)
        try:
            if sender:
                return fn.call({"from": sender})
            return fn.call()
        except Exception as exc:
            raise classify_error(exc) from exc

    def get_game_stats(self) -> GameSession:
        """Read the current game snapshot."""
        stats = self._call("getGameStats")
        return GameSession(
            id=int(stats[0]),
            creator=normalize_address(stats[1]),
            treasure_amount=int(stats[2]),
            duration_seconds=int(stats[3]),
            start_time=int(stats[4]),
            is_active=bool(stats[5]),
            is_completed=bool(stats[6]),
            winner=normalize_address(stats[7]),
            total_attempts=int(stats[8]),
            total_revenue=int(stats[9]),
        )

    def get_player_stats(self, address: str) -> PlayerStats:
        """Read a player's wrong attempt counter."""
        wrong = self._call("getPlayerStats", Web3.to_checksum_address(address))
        return PlayerStats(wrong_attempts=int(wrong))

    def get_attempt_fee(self) -> int:
        """Read the per-search fee in wei."""
        return int(self._call("getAttemptFee"))

    def owner(self) -> Optional[str]:
        """Read the contract owner (lowercase)."""
        return normalize_address(self._call("owner"))

    def is_decryption_pending(self) -> bool:
        """True while the oracle has not answered this player's last search."""
        return bool(self._call("isDecryptionPending", sender=self.player_address))

    # ── Writes ───────────────────────────────────────────────────

    def _send(self, function_name: str, args: tuple, value_wei: int, gas: int) -> PendingTransaction:
        fn = getattr(self.contract.functions, function_name)(*args)
        try:
            tx = fn.build_transaction({
                "from": self.player_address,
                "value": value_wei,
                "gas": gas,
                "nonce": self.w3.eth.get_transaction_count(self.player_address),
                "chainId": self.w3.eth.chain_id,
            })
            signed = self.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as exc:
            raise classify_error(exc) from exc

        pending = PendingTransaction(
            self.w3, tx_hash, function_name, timeout=self.confirmation_timeout
        )
        logger.info("%s sent (tx %s, value %s wei)", function_name, pending.tx_hash, value_wei)
        return pending

    def submit_search(
        self,
        handle_x: str,
        handle_y: str,
        proof_x: str,
        proof_y: str,
        value_wei: int,
    ) -> PendingTransaction:
        """Submit an encrypted guess, paying the attempt fee."""
        args = (
            Web3.to_bytes(hexstr=handle_x),
            Web3.to_bytes(hexstr=handle_y),
            Web3.to_bytes(hexstr=proof_x),
            Web3.to_bytes(hexstr=proof_y),
        )
        return self._send("searchTreasure", args, value_wei, self.search_gas_limit)

    def create_game(
        self,
        treasure_value_wei: int,
        duration_seconds: int,
        handle_x: str,
        handle_y: str,
        proof_x: str,
        proof_y: str,
        value_wei: int,
    ) -> PendingTransaction:
        """Start a new game with an encrypted treasure location."""
        args = (
            treasure_value_wei,
            duration_seconds,
            Web3.to_bytes(hexstr=handle_x),
            Web3.to_bytes(hexstr=handle_y),
            Web3.to_bytes(hexstr=proof_x),
            Web3.to_bytes(hexstr=proof_y),
        )
        return self._send("createGame", args, value_wei, self.create_gas_limit)

    # ── Events ───────────────────────────────────────────────────

    def open_event_stream(self, from_block: Optional[int] = None) -> EventStream:
        """Open a stream of this contract's events."""
        return EventStream(self.w3, self.contract, from_block=from_block)
