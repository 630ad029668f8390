import os
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv
from web3 import Web3

from lendbot.liquidation.config_loader import BotConfig, load_config
from lendbot.liquidation.contracts import create_contract_instance
from lendbot.liquidation.models import BatchResult
from lendbot.liquidation.multicall import encode_call

TEST_CHAIN_ID = 747
ENV_EXAMPLE_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env.example")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
USER_A = Web3.to_checksum_address("0x00000000000000000000000000000000000000a1")
USER_B = Web3.to_checksum_address("0x00000000000000000000000000000000000000a2")
USER_C = Web3.to_checksum_address("0x00000000000000000000000000000000000000a3")
COLLATERAL_ASSET = Web3.to_checksum_address("0x00000000000000000000000000000000000000c0")
DEBT_ASSET = Web3.to_checksum_address("0x00000000000000000000000000000000000000d0")
OTHER_ASSET = Web3.to_checksum_address("0x00000000000000000000000000000000000000e0")


@pytest.fixture()
def config() -> BotConfig:
    load_dotenv(dotenv_path=ENV_EXAMPLE_PATH)
    return load_config(TEST_CHAIN_ID)


@pytest.fixture()
def w3() -> Web3:
    return Web3()


@pytest.fixture()
def pool_interface(config, w3):
    return create_contract_instance(None, config.POOL_ABI_PATH, w3)


@pytest.fixture()
def token_interface(config, w3):
    return create_contract_instance(None, config.BEARING_TOKEN_ABI_PATH, w3)


class FakeChain:
    """
    Answers aggregated calls from in-memory state, the way the aggregator
    would for getUserAccountData, balanceOf and UNDERLYING_ASSET_ADDRESS.
    """

    def __init__(self, pool_interface, token_interface):
        self.codec = pool_interface.w3.codec
        self.health = {}
        self.balances = {}
        self.underlying = {}
        self.batches = []
        self.account_data_selector = encode_call(pool_interface, "getUserAccountData", [ZERO_ADDRESS])[:4]
        self.balance_selector = encode_call(token_interface, "balanceOf", [ZERO_ADDRESS])[:4]
        self.underlying_selector = encode_call(token_interface, "UNDERLYING_ASSET_ADDRESS", [])[:4]

    def set_health(self, pool, user, health_factor):
        self.health[(pool, user)] = health_factor

    def set_balance(self, token, user, underlying, balance):
        self.underlying[token] = underlying
        self.balances[(token, user)] = balance

    def _address_arg(self, call_data):
        (address,) = self.codec.decode(["address"], call_data[4:])
        return Web3.to_checksum_address(address)

    def respond(self, call):
        selector = call.call_data[:4]
        if selector == self.account_data_selector:
            health_factor = self.health.get((call.target, self._address_arg(call.call_data)), 0)
            debt = 0 if health_factor == 0 else 10**18
            return self.codec.encode(["uint256"] * 6, [2 * debt, debt, 0, 8000, 7500, health_factor])
        if selector == self.balance_selector:
            balance = self.balances.get((call.target, self._address_arg(call.call_data)), 0)
            return self.codec.encode(["uint256"], [balance])
        if selector == self.underlying_selector:
            return self.codec.encode(["address"], [self.underlying.get(call.target, ZERO_ADDRESS)])
        raise AssertionError(f"Unexpected call to {call.target}")

    def execute(self, calls):
        self.batches.append(list(calls))
        return BatchResult(block_number=100, return_data=[self.respond(call) for call in calls])


@pytest.fixture()
def chain(pool_interface, token_interface) -> FakeChain:
    return FakeChain(pool_interface, token_interface)


@pytest.fixture()
def fake_indexer():
    indexer = MagicMock()
    indexer.fetch_users.return_value = [USER_A, USER_B, USER_C]
    return indexer
