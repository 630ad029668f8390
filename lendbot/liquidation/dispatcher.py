"""
Submission of liquidation transactions to a pool's executor contract.
"""

import time
from typing import Any, Dict, Optional

from web3 import Web3

from .config_loader import BotConfig
from .contracts import create_contract_instance
from .exceptions import LiquidationError, TransactionBuildError
from .logging_config import setup_logger
from .models import DispatchResult, LiquidationPlan

logger = setup_logger()


class LiquidationDispatcher:
    """
    Signs and sends `execute(liquidationParams, swapParams)` and waits for one
    confirmation, then pauses for the configured cooldown. Failures propagate.
    """

    def __init__(self, config: BotConfig, w3: Optional[Web3] = None):
        self.config = config
        self.w3 = w3 or config.w3
        self.cooldown = config.COOLDOWN_SECONDS
        self.confirmation_timeout = config.CONFIRMATION_TIMEOUT
        self.gas_multiplier = config.GAS_ESTIMATE_MULTIPLIER

    def build_transaction(self, plan: LiquidationPlan, executor_address: str) -> Dict[str, Any]:
        executor = create_contract_instance(executor_address, self.config.LIQUIDATION_BOT_ABI_PATH, self.w3)
        try:
            nonce = self.w3.eth.get_transaction_count(self.config.LIQUIDATOR_ADDRESS, "pending")
            liquidation_tx = executor.functions.execute(plan.params.as_tuple(), plan.swap.as_tuple()).build_transaction(
                {
                    "chainId": self.config.CHAIN_ID,
                    "gasPrice": self.w3.eth.gas_price,
                    "from": self.config.LIQUIDATOR_ADDRESS,
                    "nonce": nonce,
                }
            )
            estimated_gas = self.w3.eth.estimate_gas(liquidation_tx) * self.gas_multiplier
        except Exception as ex:
            raise TransactionBuildError(f"Failed to build liquidation of {plan.user}: {ex}") from ex

        liquidation_tx["gas"] = int(estimated_gas)
        logger.info("Dispatcher: estimated gas for liquidation of %s: %s", plan.user, liquidation_tx["gas"])
        return liquidation_tx

    def dispatch(self, plan: LiquidationPlan, executor_address: str) -> DispatchResult:
        liquidation_tx = self.build_transaction(plan, executor_address)

        try:
            signed_tx = self.w3.eth.account.sign_transaction(liquidation_tx, self.config.LIQUIDATOR_PRIVATE_KEY)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            logger.info("Dispatcher: liquidation of %s sent, hash: %s", plan.user, tx_hash.to_0x_hex())
            tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.confirmation_timeout)
        except Exception as ex:
            raise LiquidationError(f"Liquidation of {plan.user} failed: {ex}") from ex

        if tx_receipt["status"] == 0:
            raise LiquidationError(f"Liquidation of {plan.user} reverted in tx {tx_hash.to_0x_hex()}")

        logger.info(
            "Dispatcher: liquidation of %s confirmed in block %s, gas used: %s",
            plan.user, tx_receipt["blockNumber"], tx_receipt["gasUsed"],
        )

        time.sleep(self.cooldown)
        return DispatchResult(plan=plan, tx_hash=tx_hash.to_0x_hex(), receipt=tx_receipt)
