"""
Position inspection for unhealthy users: which collateral and debt they hold on a pool.
"""

from web3.contract import Contract

from .config_loader import PoolConfig
from .contracts import create_contract_instance
from .logging_config import setup_logger
from .models import CollateralHolding, DebtHolding, HealthRecord, PositionSnapshot
from .multicall import BatchCallExecutor, PairedRequest

logger = setup_logger()


class PositionInspector:
    """
    Reads a user's balance on every configured collateral-bearing and
    debt-bearing token of a pool in one batch and keeps the nonzero ones.
    """

    def __init__(self, executor: BatchCallExecutor, token_interface: Contract, erc20_abi_path: str):
        self.executor = executor
        self.token_interface = token_interface
        self.erc20_abi_path = erc20_abi_path

    def inspect(self, record: HealthRecord, pool_config: PoolConfig) -> PositionSnapshot:
        request = PairedRequest(self.token_interface)
        for token in pool_config.collateral_tokens:
            request.add(token, record.user)
        for token in pool_config.debt_tokens:
            request.add(token, record.user)

        balances = request.execute(self.executor)
        collateral_balances = balances[: len(pool_config.collateral_tokens)]
        debt_balances = balances[len(pool_config.collateral_tokens):]

        snapshot = PositionSnapshot(user=record.user, pool=record.pool)
        snapshot.collateral = [
            CollateralHolding(b.token, b.underlying_asset, b.balance) for b in collateral_balances if b.balance > 0
        ]
        snapshot.debt = [DebtHolding(b.underlying_asset, b.balance) for b in debt_balances if b.balance > 0]

        logger.info(
            "PositionInspector: user %s on pool %s holds %s collateral and %s debt positions",
            record.user, record.pool, len(snapshot.collateral), len(snapshot.debt),
        )
        return snapshot

    def available_collateral(self, holding: CollateralHolding) -> int:
        """
        Underlying collateral held by the bearing token contract, i.e. the
        most that can be seized and withdrawn in one liquidation.
        """
        asset = create_contract_instance(holding.underlying_asset, self.erc20_abi_path, self.token_interface.w3)
        balance = asset.functions.balanceOf(holding.bearing_token).call()
        logger.debug(
            "PositionInspector: %s holds %s of %s", holding.bearing_token, balance, holding.underlying_asset
        )
        return balance
