"""
Test the config_loader module.
"""

import pytest

from lendbot.liquidation.config_loader import PoolConfig, load_config
from lendbot.liquidation.exceptions import ConfigError


def test_config_loaded_ok(config):
    """
    Test the load_config function.
    """
    assert config
    assert config.CHAIN_NAME == "flow"
    assert config.COOLDOWN_SECONDS == 3
    assert config.CONFIRMATION_TIMEOUT is None


def test_config_loader_validates(config):
    config.validate()


def test_liquidator_address_derived_from_key(config):
    assert config.LIQUIDATOR_ADDRESS == "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def test_pools_are_checksummed_records(config):
    assert len(config.POOLS) == 1
    pool = config.POOLS[0]
    assert isinstance(pool, PoolConfig)
    assert len(pool.collateral_tokens) == 2
    assert len(pool.debt_tokens) == 2
    assert config.pool(pool.address.lower()) is pool
    assert config.pool_addresses == [pool.address]


def test_unknown_pool_raises(config):
    with pytest.raises(ConfigError):
        config.pool("0x0000000000000000000000000000000000000001")


def test_config_is_read_only(config):
    with pytest.raises(ConfigError):
        config.COOLDOWN_SECONDS = 0
    with pytest.raises(ConfigError):
        config.NEW_SETTING = 1
    with pytest.raises(AttributeError):
        config.DOES_NOT_EXIST


def test_pool_config_is_frozen(config):
    with pytest.raises(AttributeError):
        config.POOLS[0].executor = "0x0000000000000000000000000000000000000001"


def test_missing_env_raises(config, monkeypatch):
    monkeypatch.delenv("LIQUIDATOR_PRIVATE_KEY")
    monkeypatch.delenv("FLOW_SUBGRAPH_URL")
    with pytest.raises(ConfigError) as excinfo:
        load_config(747)
    assert "LIQUIDATOR_PRIVATE_KEY" in str(excinfo.value)
    assert "FLOW_SUBGRAPH_URL" in str(excinfo.value)


def test_unknown_chain_raises(config):
    with pytest.raises(ConfigError):
        load_config(1)


def test_pool_entry_without_executor_raises():
    with pytest.raises(ConfigError):
        PoolConfig.from_dict({"address": "0x0000000000000000000000000000000000000001"})


def test_nested_settings_are_read_only(config):
    with pytest.raises(TypeError):
        config.contracts["ROUTER"] = "0x0000000000000000000000000000000000000001"
    assert isinstance(config.pools, tuple)
    with pytest.raises(TypeError):
        config.pools[0]["executor"] = "0x0000000000000000000000000000000000000001"


def test_logs_path_is_per_chain(config, monkeypatch):
    monkeypatch.delenv("LOGS_PATH", raising=False)
    assert load_config(747).LOGS_PATH == "logs/flow_lendbot.log"

    monkeypatch.setenv("LOGS_PATH", "/tmp/custom.log")
    assert load_config(747).LOGS_PATH == "/tmp/custom.log"
