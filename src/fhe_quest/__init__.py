"""
fhe_quest — FHE Quest treasure hunt client
==========================================

Play an encrypted treasure hunt on a 10x10 grid. The treasure location
and every guess stay encrypted on chain; a decryption oracle reports
whether a search hit the treasure.

Quick Start:
    from fhe_quest import QuestRunner, load_config
    runner = QuestRunner(load_config("config.json"), relayer=relayer)
    runner.connect()
    runner.search(3, 4)
    outcome = runner.wait_for_outcome()
    print(outcome.describe())

Watching the game from the command line:
    python -m fhe_quest status --config config.json
    python -m fhe_quest watch --config config.json
"""

from .runner import QuestRunner, ActiveGame
from ._runner_config import QuestConfig, load_config, validate_config
from .errors import (
    FheQuestError,
    UserRejected,
    InsufficientFunds,
    TransactionReverted,
    EncryptionUnavailable,
    EncryptionFailure,
    NetworkMismatch,
    AttemptAlreadyPending,
    OracleTimeout,
    GameNotActive,
    AttemptCancelled,
    MissingEncryptedCoordinates,
    classify_error,
)
from .types import (
    GRID_SIZE,
    Coordinate,
    GameSession,
    PlayerStats,
    EncryptedValue,
    EncryptedCoordinates,
    Outcome,
    OutcomeKind,
)
from ._resolver import AttemptStatus, CreatorState

__version__ = "1.0.0"

__all__ = [
    # Main classes
    "QuestRunner",
    "ActiveGame",
    "QuestConfig",
    "load_config",
    "validate_config",
    # Errors
    "FheQuestError",
    "UserRejected",
    "InsufficientFunds",
    "TransactionReverted",
    "EncryptionUnavailable",
    "EncryptionFailure",
    "NetworkMismatch",
    "AttemptAlreadyPending",
    "OracleTimeout",
    "GameNotActive",
    "AttemptCancelled",
    "MissingEncryptedCoordinates",
    "classify_error",
    # Types
    "GRID_SIZE",
    "Coordinate",
    "GameSession",
    "PlayerStats",
    "EncryptedValue",
    "EncryptedCoordinates",
    "Outcome",
    "OutcomeKind",
    "AttemptStatus",
    "CreatorState",
]
