# Area: Gateway
"""Encryption relayer client."""

from .encryption_gateway import (
    EncryptionGateway,
    EncryptedInput,
    RelayerInstance,
    to_hex,
    UINT32_MAX,
)

__all__ = [
    "EncryptionGateway",
    "EncryptedInput",
    "RelayerInstance",
    "to_hex",
    "UINT32_MAX",
]
