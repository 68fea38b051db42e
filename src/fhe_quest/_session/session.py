# Area: Session
"""
fhe_quest._session.session — Connected session value
====================================================

A ``Session`` binds the player account, the chain it is connected to,
the ledger client and the encryption gateway. It is immutable: switching
account or network builds a new one and replaces the old one as a unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..errors import NetworkMismatch
from .._gateway import EncryptionGateway, RelayerInstance
from .._ledger import LedgerClient

logger = logging.getLogger("fhe_quest.session")


@dataclass(frozen=True)
class Session:
    """
    Everything bound to one (account, chain) connection.

    Attributes:
        account: Checksummed player address
        chain_id: Chain the session was opened on
        ledger: Contract client signing as ``account``
        gateway: Encryption gateway for this session
    """

    account: str
    chain_id: int
    ledger: LedgerClient
    gateway: EncryptionGateway

    @property
    def contract_address(self) -> str:
        return self.ledger.contract_address


def check_network(chain_id: int, expected_chain_id: int) -> None:
    """
    Raises:
        NetworkMismatch: If the chain id is not the target chain
    """
    if int(chain_id) != int(expected_chain_id):
        raise NetworkMismatch(int(chain_id), int(expected_chain_id))


def open_session(
    w3: Web3,
    account: LocalAccount,
    contract_address: str,
    expected_chain_id: int,
    relayer: Optional[RelayerInstance] = None,
    **ledger_options: Any,
) -> Session:
    """
    Open a session for ``account`` after checking the connected chain.

    Raises:
        NetworkMismatch: If the provider is on another chain
    """
    chain_id = w3.eth.chain_id
    check_network(chain_id, expected_chain_id)

    ledger = LedgerClient(w3, contract_address, account, **ledger_options)
    session = Session(
        account=account.address,
        chain_id=int(chain_id),
        ledger=ledger,
        gateway=EncryptionGateway(relayer),
    )
    logger.info("Session opened for %s on chain %s", account.address, chain_id)
    return session
