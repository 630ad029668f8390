"""
Account health evaluation over the user x pool cross-product.
"""

from typing import List, Sequence, Tuple

from web3.contract import Contract

from .logging_config import setup_logger
from .models import BatchCall, HealthRecord
from .multicall import BatchCallExecutor, encode_call

logger = setup_logger()

HEALTH_FACTOR_ONE = 10**18

# totalCollateralBase, totalDebtBase, availableBorrowsBase,
# currentLiquidationThreshold, ltv, healthFactor
ACCOUNT_DATA_TYPES = ["uint256"] * 6


def is_liquidatable(health_factor: int) -> bool:
    """
    A zero health factor means the account has no debt, so only
    0 < health_factor < 1e18 counts as unhealthy.
    """
    return 0 < health_factor < HEALTH_FACTOR_ONE


def locate(index: int, users: Sequence[str], pools: Sequence[str]) -> Tuple[str, str]:
    """Map a flat result index back to its (user, pool), pools outer and users inner."""
    return users[index % len(users)], pools[index // len(users)]


class AccountHealthEvaluator:
    """Fetches `getUserAccountData` for every user on every pool in one batch."""

    def __init__(self, executor: BatchCallExecutor, pool_interface: Contract):
        self.executor = executor
        self.pool_interface = pool_interface
        self.codec = pool_interface.w3.codec

    def build_health_requests(self, users: Sequence[str], pools: Sequence[str]) -> List[BatchCall]:
        return [
            BatchCall(pool, encode_call(self.pool_interface, "getUserAccountData", [user]))
            for pool in pools
            for user in users
        ]

    def evaluate(self, users: Sequence[str], pools: Sequence[str]) -> List[HealthRecord]:
        if not users or not pools:
            return []

        result = self.executor.execute(self.build_health_requests(users, pools))
        logger.info(
            "HealthEvaluator: fetched %s health entries (%s users x %s pools) at block %s",
            len(result.return_data), len(users), len(pools), result.block_number,
        )

        records = []
        for index, raw in enumerate(result.return_data):
            user, pool = locate(index, users, pools)
            total_collateral, total_debt, _, _, _, health_factor = self.codec.decode(ACCOUNT_DATA_TYPES, raw)
            records.append(HealthRecord(user, pool, health_factor, total_collateral, total_debt))
        return records

    def find_unhealthy(self, users: Sequence[str], pools: Sequence[str]) -> List[HealthRecord]:
        unhealthy = [record for record in self.evaluate(users, pools) if is_liquidatable(record.health_factor)]
        for record in unhealthy:
            logger.info(
                "HealthEvaluator: user %s on pool %s is unhealthy, HF: %s",
                record.user, record.pool, record.health_score,
            )
        return unhealthy
