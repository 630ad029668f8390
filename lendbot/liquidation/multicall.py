"""
Batched static calls through a multicall aggregator contract.
"""

from typing import List, Sequence

from web3 import Web3
from web3.contract import Contract

from .exceptions import BatchCallError
from .logging_config import setup_logger
from .models import BatchCall, BatchResult, TokenBalance

logger = setup_logger()


class BatchCallExecutor:
    """
    Runs many read-only calls in one `aggregate` static call so every result
    comes from the same block. Any revert fails the whole batch.
    """

    def __init__(self, multicall: Contract):
        self.multicall = multicall

    def execute(self, calls: Sequence[BatchCall]) -> BatchResult:
        if not calls:
            return BatchResult(block_number=0, return_data=[])

        logger.debug("Multicall: aggregating %s calls", len(calls))
        try:
            block_number, return_data = self.multicall.functions.aggregate(
                [(call.target, call.call_data) for call in calls]
            ).call()
        except Exception as ex:
            raise BatchCallError(f"Multicall of {len(calls)} calls failed: {ex}") from ex

        if len(return_data) != len(calls):
            raise BatchCallError(f"Multicall returned {len(return_data)} results for {len(calls)} calls")

        return BatchResult(block_number=block_number, return_data=[bytes(data) for data in return_data])


class PairedRequest:
    """
    Queues a `balanceOf(user)` and an `UNDERLYING_ASSET_ADDRESS()` call per
    bearing token and decodes the batch back into one TokenBalance per token.
    """

    def __init__(self, token_interface: Contract):
        self.token_interface = token_interface
        self.codec = token_interface.w3.codec
        self.tokens: List[str] = []
        self.calls: List[BatchCall] = []

    def add(self, token: str, user: str) -> None:
        self.tokens.append(token)
        self.calls.append(BatchCall(token, encode_call(self.token_interface, "balanceOf", [user])))
        self.calls.append(BatchCall(token, encode_call(self.token_interface, "UNDERLYING_ASSET_ADDRESS", [])))

    def execute(self, executor: BatchCallExecutor) -> List[TokenBalance]:
        result = executor.execute(self.calls)
        return self.decode(result.return_data)

    def decode(self, return_data: Sequence[bytes]) -> List[TokenBalance]:
        if len(return_data) != 2 * len(self.tokens):
            raise BatchCallError(f"Expected {2 * len(self.tokens)} results, got {len(return_data)}")

        balances = []
        for i, token in enumerate(self.tokens):
            (balance,) = self.codec.decode(["uint256"], return_data[2 * i])
            (underlying,) = self.codec.decode(["address"], return_data[2 * i + 1])
            balances.append(TokenBalance(token, Web3.to_checksum_address(underlying), balance))
        return balances


def encode_call(interface: Contract, fn_name: str, args: list) -> bytes:
    return Web3.to_bytes(hexstr=interface.encode_abi(fn_name, args=args))
