# Area: Ledger
"""
fhe_quest._ledger.abi — Consumed contract surface
=================================================

Minimal ABI of the treasure hunt contract: the read and payable write
functions the client calls and the five events it listens to.
Encrypted inputs travel as bytes32 handles plus a bytes input proof.
"""

SEPOLIA_CHAIN_ID = 11155111


def _fn(name, inputs, outputs, mutability="view"):
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


def _event(name, inputs):
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [
            {"name": n, "type": t, "indexed": indexed} for n, t, indexed in inputs
        ],
    }


CONTRACT_ABI = [
    _fn("getGameStats", [], [
        ("id", "uint256"),
        ("creator", "address"),
        ("treasureAmount", "uint256"),
        ("duration", "uint256"),
        ("startTime", "uint256"),
        ("isActive", "bool"),
        ("isCompleted", "bool"),
        ("winner", "address"),
        ("totalAttempts", "uint256"),
        ("totalRevenue", "uint256"),
    ]),
    _fn("getPlayerStats", [("player", "address")], [("wrongAttempts", "uint256")]),
    _fn("getAttemptFee", [], [("", "uint256")]),
    _fn("owner", [], [("", "address")]),
    _fn("isDecryptionPending", [], [("", "bool")]),
    _fn("searchTreasure", [
        ("encryptedX", "bytes32"),
        ("encryptedY", "bytes32"),
        ("proofX", "bytes"),
        ("proofY", "bytes"),
    ], [], mutability="payable"),
    _fn("createGame", [
        ("treasureValue", "uint256"),
        ("duration", "uint256"),
        ("encryptedX", "bytes32"),
        ("encryptedY", "bytes32"),
        ("proofX", "bytes"),
        ("proofY", "bytes"),
    ], [], mutability="payable"),
    _event("AttemptMade", [
        ("gameId", "uint256", True),
        ("player", "address", True),
        ("isCorrect", "bool", False),
    ]),
    _event("TreasureFound", [
        ("gameId", "uint256", True),
        ("winner", "address", True),
        ("x", "uint32", False),
        ("y", "uint32", False),
        ("amount", "uint256", False),
    ]),
    _event("GameCompleted", [
        ("gameId", "uint256", True),
        ("winner", "address", True),
        ("totalRevenue", "uint256", False),
    ]),
    _event("DecryptionCompleted", [
        ("gameId", "uint256", True),
        ("player", "address", True),
        ("isCorrect", "bool", False),
    ]),
    _event("WrongAttemptRecorded", [
        ("player", "address", True),
        ("gameId", "uint256", True),
    ]),
]

EVENT_NAMES = tuple(entry["name"] for entry in CONTRACT_ABI if entry["type"] == "event")


def event_signature(name: str) -> str:
    """Canonical signature, e.g. ``AttemptMade(uint256,address,bool)``."""
    for entry in CONTRACT_ABI:
        if entry["type"] == "event" and entry["name"] == name:
            types = ",".join(item["type"] for item in entry["inputs"])
            return f"{name}({types})"
    raise KeyError(name)
