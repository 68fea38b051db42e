# Area: Ledger
"""
Ledger access: contract ABI, typed client, decoded events and dispatch.
"""

from .abi import CONTRACT_ABI, SEPOLIA_CHAIN_ID
from .events import (
    AttemptMade,
    TreasureFound,
    GameCompleted,
    DecryptionCompleted,
    WrongAttemptRecorded,
    LedgerEvent,
    decode_event,
)
from .event_dispatcher import EventDispatcher
from .event_stream import EventStream
from .ledger_client import LedgerClient, PendingTransaction

__all__ = [
    "CONTRACT_ABI",
    "SEPOLIA_CHAIN_ID",
    "AttemptMade",
    "TreasureFound",
    "GameCompleted",
    "DecryptionCompleted",
    "WrongAttemptRecorded",
    "LedgerEvent",
    "decode_event",
    "EventDispatcher",
    "EventStream",
    "LedgerClient",
    "PendingTransaction",
]
