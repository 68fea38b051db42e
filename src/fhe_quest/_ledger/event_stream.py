# Area: Ledger
"""
fhe_quest._ledger.event_stream — Polled contract event stream
=============================================================

Fetches the contract's logs block range by block range and decodes them
into typed events, in emission order (block number, then log index).
Scanning starts at the head seen when the stream is opened, so events
mined between opening and the first poll are still delivered.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from web3 import Web3

from .abi import EVENT_NAMES, event_signature
from .events import LedgerEvent, decode_event

logger = logging.getLogger("fhe_quest.ledger.events")


def event_topics() -> Dict[bytes, str]:
    """Map topic0 (keccak of the event signature) to the event name."""
    return {bytes(Web3.keccak(text=event_signature(name))): name for name in EVENT_NAMES}


class EventStream:
    """
    Multiplexed stream of the contract's five events.

    Args:
        w3: Connected Web3 instance
        contract: web3 contract bound to the treasure hunt address
        from_block: First block to scan; defaults to the head when opened
    """

    def __init__(self, w3: Web3, contract: Any, from_block: Optional[int] = None):
        self._w3 = w3
        self._contract = contract
        self._next_block = w3.eth.block_number if from_block is None else from_block
        self._topics = event_topics()

    @property
    def next_block(self) -> int:
        return self._next_block

    def poll(self) -> List[LedgerEvent]:
        """Return the events emitted since the previous poll, oldest first."""
        head = self._w3.eth.block_number
        if head < self._next_block:
            return []

        logs = self._w3.eth.get_logs({
            "address": self._contract.address,
            "fromBlock": self._next_block,
            "toBlock": head,
        })
        self._next_block = head + 1

        ordered = sorted(logs, key=lambda log: (log["blockNumber"], log["logIndex"]))
        events: List[LedgerEvent] = []
        for log in ordered:
            event = self._decode(log)
            if event is not None:
                events.append(event)
        return events

    def _decode(self, log: Any) -> Optional[LedgerEvent]:
        topics = log.get("topics") or []
        if not topics:
            return None
        name = self._topics.get(bytes(topics[0]))
        if name is None:
            logger.debug("Skipping log with unknown topic %s", Web3.to_hex(topics[0]))
            return None

        decoded = getattr(self._contract.events, name)().process_log(log)
        return decode_event(
            name,
            decoded["args"],
            block_number=log["blockNumber"],
            log_index=log["logIndex"],
        )
