# Area: Shared Tests
"""Tests for runner configuration loading and validation."""

import json

import pytest

from fhe_quest._runner_config import ENV_MAPPINGS, QuestConfig, load_config, validate_config

CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real environment and .env files out of config tests."""
    for key in ENV_MAPPINGS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("fhe_quest._runner_config.load_dotenv", lambda: False)


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_defaults(self):
        config = validate_config({"rpc_url": "http://localhost:8545", "contract_address": CONTRACT})
        assert isinstance(config, QuestConfig)
        assert config.chain_id == 11155111
        assert config.fallback_timeout_seconds == 10.0
        assert config.refresh_interval_seconds == 10.0
        assert config.poll_interval_seconds == 1.0
        assert config.search_gas_limit == 500_000
        assert config.create_gas_limit == 1_000_000
        assert config.private_key is None

    def test_contract_address_checksummed(self):
        config = validate_config({"rpc_url": "http://x", "contract_address": CONTRACT})
        assert config.contract_address == "0x5FbDB2315678afecb367f032d93F642f64180aa3"

    def test_missing_required_keys(self):
        with pytest.raises(ValueError) as exc_info:
            validate_config({})
        assert "rpc_url" in str(exc_info.value)
        assert "contract_address" in str(exc_info.value)

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            validate_config({"rpc_url": "http://x", "contract_address": "0x1234"})

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError):
            validate_config({
                "rpc_url": "http://x", "contract_address": CONTRACT,
                "fallback_timeout_seconds": 0,
            })

    def test_private_key_is_secret(self):
        config = validate_config({
            "rpc_url": "http://x", "contract_address": CONTRACT, "private_key": "0xsecret",
        })
        assert "0xsecret" not in repr(config)
        assert config.private_key.get_secret_value() == "0xsecret"


class TestLoadConfig:
    """Tests for load_config()."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "rpc_url": "http://node:8545",
            "contract_address": CONTRACT,
            "poll_interval_seconds": 2,
        }))
        config = load_config(str(path))
        assert config.rpc_url == "http://node:8545"
        assert config.poll_interval_seconds == 2.0

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"rpc_url": "http://file", "contract_address": CONTRACT}))
        monkeypatch.setenv("FHE_QUEST_RPC_URL", "http://env")
        monkeypatch.setenv("FHE_QUEST_CHAIN_ID", "31337")

        config = load_config(str(path))

        assert config.rpc_url == "http://env"
        assert config.chain_id == 31337

    def test_environment_only(self, monkeypatch):
        monkeypatch.setenv("FHE_QUEST_RPC_URL", "http://env")
        monkeypatch.setenv("FHE_QUEST_CONTRACT_ADDRESS", CONTRACT)
        assert load_config(None).rpc_url == "http://env"

    def test_missing_file_and_env(self, tmp_path):
        with pytest.raises(ValueError):
            load_config(str(tmp_path / "missing.json"))
