# Area: Gateway
"""
fhe_quest._gateway.encryption_gateway — FHE relayer wrapper
===========================================================

Turns plaintext 32-bit integers into ciphertext handles and input proofs
bound to a (contract, player) pair, using an externally supplied relayer
instance. Also exposes the relayer's user and public decryption flows.

The relayer itself is an external collaborator: anything implementing
``RelayerInstance`` can be plugged in. Failures surface immediately as
``EncryptionUnavailable`` or ``EncryptionFailure``; nothing is retried.
"""

from __future__ import annotations

import logging
import string
import time
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from eth_account import Account
from web3 import Web3

from ..errors import EncryptionFailure, EncryptionUnavailable
from ..types import EncryptedCoordinates, EncryptedValue

logger = logging.getLogger("fhe_quest.gateway")

UINT32_MAX = 2 ** 32 - 1
HEX_PREFIX = "0x"
USER_DECRYPT_DURATION_DAYS = "10"
_HEX_DIGITS = set(string.hexdigits)


class EncryptedInput(Protocol):
    """Buffer returned by ``RelayerInstance.create_encrypted_input``."""

    def add32(self, value: int) -> Any:
        ...

    def encrypt(self) -> Mapping[str, Any]:
        """Return ``{"handles": [bytes, ...], "inputProof": bytes}``."""
        ...


class RelayerInstance(Protocol):
    """Protocol for the external FHE relayer."""

    def create_encrypted_input(self, contract_address: str, user_address: str) -> EncryptedInput:
        ...

    def generate_keypair(self) -> Mapping[str, str]:
        ...

    def create_eip712(
        self,
        public_key: str,
        contract_addresses: List[str],
        start_timestamp: str,
        duration_days: str,
    ) -> Mapping[str, Any]:
        ...

    def user_decrypt(
        self,
        handle_contract_pairs: List[Dict[str, str]],
        private_key: str,
        public_key: str,
        signature: str,
        contract_addresses: List[str],
        user_address: str,
        start_timestamp: str,
        duration_days: str,
    ) -> Mapping[str, Any]:
        ...

    def public_decrypt(self, handles: Sequence[str]) -> Any:
        ...


def to_hex(value: Any, field: str) -> str:
    """
    Serialize relayer output as 0x-prefixed, lowercase, even-length hex.

    Args:
        value: bytes-like or hex string from the relayer
        field: Field name used in error messages

    Raises:
        EncryptionFailure: If the value is empty, not hex, or of odd length
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if not raw:
            raise EncryptionFailure(f"Relayer returned an empty {field}")
        return HEX_PREFIX + raw.hex()

    if isinstance(value, str):
        body = value.strip()
        if body[:2].lower() == HEX_PREFIX:
            body = body[2:]
        if not body or any(ch not in _HEX_DIGITS for ch in body):
            raise EncryptionFailure(f"Relayer returned a non-hex {field}: {value!r}")
        if len(body) % 2:
            raise EncryptionFailure(f"Relayer returned an odd-length {field}")
        return HEX_PREFIX + body.lower()

    raise EncryptionFailure(
        f"Relayer returned {type(value).__name__} for {field}, expected bytes or hex"
    )


def _check_uint32(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Encrypted value must be an integer, got {value!r}")
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"Encrypted value must fit in 32 unsigned bits, got {value}")


def _field(result: Any, *names: str) -> Any:
    for name in names:
        if isinstance(result, Mapping):
            if name in result:
                return result[name]
        elif hasattr(result, name):
            return getattr(result, name)
    return None


class EncryptionGateway:
    """
    Client for the FHE encryption relayer.

    Attributes:
        instance: The relayer instance, or None until initialized
    """

    def __init__(self, instance: Optional[RelayerInstance] = None):
        self.instance = instance

    @property
    def is_ready(self) -> bool:
        return self.instance is not None

    def _require_instance(self) -> RelayerInstance:
        if self.instance is None:
            raise EncryptionUnavailable("Relayer not initialized")
        return self.instance

    def encrypt(self, contract_address: str, player_address: str, value: int) -> EncryptedValue:
        """
        Encrypt one unsigned 32-bit value for (contract, player).

        Raises:
            ValueError: If value is not a non-negative 32-bit integer
            EncryptionUnavailable: If the relayer is not initialized
            EncryptionFailure: If the relayer raises or returns a malformed shape
        """
        _check_uint32(value)
        instance = self._require_instance()

        try:
            buffer = instance.create_encrypted_input(contract_address, player_address)
            buffer.add32(value)
            result = buffer.encrypt()
        except Exception as exc:
            raise EncryptionFailure(
                f"Encryption failed: {exc}",
                {"contract": contract_address, "player": player_address},
            ) from exc

        return self._parse_result(result)

    def encrypt_coordinates(
        self, contract_address: str, player_address: str, x: int, y: int
    ) -> EncryptedCoordinates:
        """Encrypt x and y independently (two relayer calls)."""
        logger.debug("Encrypting X coordinate (%s)", x)
        encrypted_x = self.encrypt(contract_address, player_address, x)
        logger.debug("Encrypting Y coordinate (%s)", y)
        encrypted_y = self.encrypt(contract_address, player_address, y)
        return EncryptedCoordinates(x=encrypted_x, y=encrypted_y)

    def _parse_result(self, result: Any) -> EncryptedValue:
        handles = _field(result, "handles")
        proof = _field(result, "inputProof", "input_proof")

        if isinstance(handles, (str, bytes, bytearray)) or not handles:
            raise EncryptionFailure("Invalid encrypted data format: missing handle")
        if proof is None:
            raise EncryptionFailure("Invalid encrypted data format: missing input proof")

        try:
            handle = handles[0]
        except (TypeError, IndexError, KeyError) as exc:
            raise EncryptionFailure("Invalid encrypted data format: unreadable handles") from exc

        return EncryptedValue(
            handle=to_hex(handle, "handle"),
            proof=to_hex(proof, "input proof"),
        )

    def user_decrypt(self, contract_address: str, handle: str, private_key: str) -> Any:
        """
        Decrypt a ciphertext handle the player is allowed to read.

        Generates an ephemeral keypair, signs the relayer's EIP-712 request
        with the player's key and asks the relayer to re-encrypt for it.
        """
        instance = self._require_instance()
        signer = Account.from_key(private_key)

        try:
            keypair = instance.generate_keypair()
            start_timestamp = str(int(time.time()))
            contract_addresses = [contract_address]
            eip712 = instance.create_eip712(
                keypair["publicKey"],
                contract_addresses,
                start_timestamp,
                USER_DECRYPT_DURATION_DAYS,
            )
            signed = Account.sign_typed_data(
                private_key,
                eip712["domain"],
                {
                    "UserDecryptRequestVerification":
                        eip712["types"]["UserDecryptRequestVerification"],
                },
                eip712["message"],
            )
            signature = Web3.to_hex(signed.signature)[len(HEX_PREFIX):]
            result = instance.user_decrypt(
                [{"handle": handle, "contractAddress": contract_address}],
                keypair["privateKey"],
                keypair["publicKey"],
                signature,
                contract_addresses,
                signer.address,
                start_timestamp,
                USER_DECRYPT_DURATION_DAYS,
            )
        except Exception as exc:
            raise EncryptionFailure(f"User decryption failed: {exc}") from exc

        if not isinstance(result, Mapping) or handle not in result:
            raise EncryptionFailure(f"User decryption returned no value for {handle}")
        return result[handle]

    def public_decrypt(self, handles: Sequence[str]) -> Any:
        """Decrypt publicly decryptable handles through the relayer."""
        instance = self._require_instance()
        try:
            return instance.public_decrypt(list(handles))
        except Exception as exc:
            raise EncryptionFailure(f"Public decryption failed: {exc}") from exc
