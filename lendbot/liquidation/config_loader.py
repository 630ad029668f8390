"""
Config Loader module - static settings, environment secrets and the shared Web3 instance
"""

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple

import yaml
from web3 import Web3

from .contracts import create_contract_instance
from .exceptions import ConfigError

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Web3Singleton:
    """
    Singleton class to manage w3 object creation per RPC URL
    """

    _instances = {}

    @staticmethod
    def get_instance(rpc_url: Optional[str] = None):
        """
        Set up a Web3 instance for the passed RPC URL.
        Maintains separate instances per unique RPC URL.
        """

        if rpc_url not in Web3Singleton._instances:
            Web3Singleton._instances[rpc_url] = Web3(Web3.HTTPProvider(rpc_url))

        return Web3Singleton._instances[rpc_url]


def setup_w3(rpc_url: Optional[str] = None) -> Web3:
    """
    Get the Web3 instance from the singleton class

    Args:
        rpc_url (Optional[str]): RPC URL of the chain

    Returns:
        Web3: Web3 instance.
    """
    return Web3Singleton.get_instance(rpc_url)


@dataclass(frozen=True)
class PoolConfig:
    """Static description of one lending pool and the bot contract that liquidates on it."""

    address: str
    executor: str
    collateral_tokens: Tuple[str, ...]
    debt_tokens: Tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PoolConfig":
        try:
            return cls(
                address=Web3.to_checksum_address(data["address"]),
                executor=Web3.to_checksum_address(data["executor"]),
                collateral_tokens=tuple(Web3.to_checksum_address(t) for t in data.get("collateral_tokens", [])),
                debt_tokens=tuple(Web3.to_checksum_address(t) for t in data.get("debt_tokens", [])),
            )
        except KeyError as exc:
            raise ConfigError(f"Pool entry is missing {exc}") from exc
        except ValueError as exc:
            raise ConfigError(f"Pool entry has an invalid address: {exc}") from exc


class BotConfig:
    """
    Read-only config object to access config variables.

    Built once at startup and handed to every component; assigning to an
    attribute after construction raises ConfigError.
    """

    required_env_vars = [
        "LIQUIDATOR_PRIVATE_KEY",
        # "NOTIFICATION_URL",  # Optional
    ]

    def __init__(self, chain_id: int, global_config: Dict[str, Any], chain_config: Dict[str, Any]):
        self.CHAIN_ID = chain_id
        self.CHAIN_NAME = chain_config["name"]
        self._global = _freeze(_resolve_abi_paths(global_config))
        self._chain = _freeze(chain_config)

        # validate env
        self.validate()

        self.RPC_URL = os.environ[self._chain["RPC_NAME"]]
        self.INDEXER_URL = os.environ[self._chain["INDEXER_NAME"]]
        self.NOTIFICATION_URL = os.environ.get("NOTIFICATION_URL", "")
        self.LOGS_PATH = os.environ.get("LOGS_PATH") or f"{self._global['LOGS_DIR']}/{self.CHAIN_NAME}_lendbot.log"

        self.w3 = setup_w3(self.RPC_URL)

        self.LIQUIDATOR_PRIVATE_KEY = os.environ["LIQUIDATOR_PRIVATE_KEY"]
        try:
            self.LIQUIDATOR_ADDRESS = self.w3.eth.account.from_key(self.LIQUIDATOR_PRIVATE_KEY).address
        except ValueError as exc:
            raise ConfigError("LIQUIDATOR_PRIVATE_KEY is not a valid private key") from exc

        contracts = self._chain.get("contracts", {})
        missing_contracts = [key for key in ("MULTICALL", "ROUTER", "WRAPPED_NATIVE") if not contracts.get(key)]
        if missing_contracts:
            raise ConfigError(f"Missing contract addresses for {self.CHAIN_NAME}: {', '.join(missing_contracts)}")
        self.MULTICALL = Web3.to_checksum_address(contracts["MULTICALL"])
        self.ROUTER = Web3.to_checksum_address(contracts["ROUTER"])
        self.WRAPPED_NATIVE = Web3.to_checksum_address(contracts["WRAPPED_NATIVE"])
        # Not read by the pipeline yet, see DESIGN.md (oracle pricing)
        self.ORACLE = Web3.to_checksum_address(contracts["ORACLE"]) if contracts.get("ORACLE") else None

        self.POOLS: Tuple[PoolConfig, ...] = tuple(PoolConfig.from_dict(p) for p in self._chain.get("pools", []))
        if not self.POOLS:
            raise ConfigError(f"No pools configured for {self.CHAIN_NAME}")

        self.multicall = create_contract_instance(self.MULTICALL, self.MULTICALL_ABI_PATH, self.w3)

        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_frozen", False):
            raise ConfigError(f"Config is read-only, cannot set '{name}'")
        super().__setattr__(name, value)

    def __getattr__(self, name: str) -> Any:
        """Look up config values in chain-specific, then contracts, then global config."""
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._chain:
            return self._chain[name]
        if name in self._chain.get("contracts", {}):
            return self._chain["contracts"][name]
        if name in self._global:
            return self._global[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    @property
    def pool_addresses(self) -> List[str]:
        return [pool.address for pool in self.POOLS]

    def pool(self, address: str) -> PoolConfig:
        """Return the static configuration of the pool at `address`."""
        for pool in self.POOLS:
            if pool.address.lower() == address.lower():
                return pool
        raise ConfigError(f"Pool {address} is not configured for {self.CHAIN_NAME}")

    def validate(self) -> None:
        """
        Validates that all required environment variables are set.
        Raises an error if any are missing.
        """
        required = self.required_env_vars + [self._chain["RPC_NAME"], self._chain["INDEXER_NAME"]]
        missing_keys = [key for key in required if not os.getenv(key)]
        if missing_keys:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing_keys)}")


def _freeze(value: Any) -> Any:
    """Return a read-only copy of nested YAML data: mappings become proxies, lists become tuples."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _resolve_abi_paths(global_config: Dict[str, Any]) -> Dict[str, Any]:
    resolved = dict(global_config)
    for key, value in global_config.items():
        if key.endswith("_ABI_PATH") and not os.path.isabs(value):
            resolved[key] = os.path.join(PACKAGE_DIR, value)
    return resolved


def load_raw_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    if config_path is None:
        config_path = os.path.join(PACKAGE_DIR, "config.yaml")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found at {config_path}") from exc
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML file: {e}") from e


def load_config(chain_id: Optional[int] = None, config_path: Optional[str] = None) -> BotConfig:
    config = load_raw_config(config_path)

    if chain_id is None:
        chain_id = config["global"]["DEFAULT_CHAIN_ID"]

    if chain_id not in config["chains"]:
        raise ConfigError(f"No configuration found for chain ID {chain_id}")

    return BotConfig(chain_id=chain_id, global_config=config["global"], chain_config=config["chains"][chain_id])
