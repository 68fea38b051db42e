# Area: Shared
"""
fhe_quest._runner_config — Runner Configuration
===============================================

Configuration model, validation and loading for QuestRunner.
Values come from an optional JSON file, overridden by environment
variables (a local ``.env`` file is loaded first).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from web3 import Web3

from ._ledger.abi import SEPOLIA_CHAIN_ID

logger = logging.getLogger("fhe_quest")

# Environment variable → config key
ENV_MAPPINGS = {
    "FHE_QUEST_RPC_URL": "rpc_url",
    "FHE_QUEST_CONTRACT_ADDRESS": "contract_address",
    "FHE_QUEST_PRIVATE_KEY": "private_key",
    "FHE_QUEST_CHAIN_ID": "chain_id",
    "FHE_QUEST_POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "FHE_QUEST_FALLBACK_TIMEOUT_SECONDS": "fallback_timeout_seconds",
    "FHE_QUEST_LOG_FILE": "log_file",
}


class QuestConfig(BaseModel):
    """
    Validated client configuration.

    Attributes:
        rpc_url: JSON-RPC endpoint of the target chain
        contract_address: Treasure hunt contract (checksummed on load)
        private_key: Player key used to sign transactions
        chain_id: Target chain id (Sepolia by default)
        fallback_timeout_seconds: Oracle fallback after confirmation
        refresh_interval_seconds: Safety-net full refresh interval
        poll_interval_seconds: Runner loop period (also the countdown tick)
        search_gas_limit: Gas limit for searchTreasure
        create_gas_limit: Gas limit for createGame
        confirmation_timeout_seconds: Max wait for a transaction receipt
        log_file: JSON log file path
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    rpc_url: str
    contract_address: str
    private_key: Optional[SecretStr] = None
    chain_id: int = SEPOLIA_CHAIN_ID
    fallback_timeout_seconds: float = Field(10.0, gt=0)
    refresh_interval_seconds: float = Field(10.0, gt=0)
    poll_interval_seconds: float = Field(1.0, gt=0)
    search_gas_limit: int = Field(500_000, gt=0)
    create_gas_limit: int = Field(1_000_000, gt=0)
    confirmation_timeout_seconds: float = Field(180.0, gt=0)
    log_file: str = "fhe_quest.log"

    @field_validator("contract_address")
    @classmethod
    def _checksum_contract(cls, value: str) -> str:
        if not Web3.is_address(value):
            raise ValueError(f"not a valid address: {value}")
        return Web3.to_checksum_address(value)


def validate_config(config: Dict[str, Any]) -> QuestConfig:
    """
    Validate a configuration dict.

    Raises:
        ValueError: Listing every missing or invalid key
    """
    try:
        return QuestConfig.model_validate(config)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValueError(f"Invalid config: {problems}") from exc


def load_config(config_path: Optional[str] = None) -> QuestConfig:
    """Load config from a JSON file and environment, then validate it."""
    load_dotenv()
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
        else:
            logger.warning(f"Config file not found: {path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    return validate_config(config)
