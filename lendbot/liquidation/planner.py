"""
Liquidation planning: bounded seize amount and swap route for a selected position.
"""

from typing import Tuple

from .logging_config import setup_logger
from .models import CollateralHolding, DebtHolding, LiquidationParams, LiquidationPlan, SwapParams

logger = setup_logger()

UINT256_MAX = int(2**256 - 1)

# 10% bonus over the nominal debt amount, assuming price parity between assets
LIQUIDATION_BONUS_NUMERATOR = 1100
LIQUIDATION_BONUS_DENOMINATOR = 1000


def compute_seize_amounts(debt_amount: int, available: int) -> Tuple[int, int]:
    """
    Bound the seize amount by what is available.

    Args:
        debt_amount: Outstanding debt of the selected debt holding.
        available: Collateral available to seize.

    Returns:
        (seize_amount, debt_to_cover). When the desired amount fits, debt to
        cover is UINT256_MAX and the executor repays as much as it needs;
        otherwise both are capped to `available`.
    """
    desired = debt_amount * LIQUIDATION_BONUS_NUMERATOR // LIQUIDATION_BONUS_DENOMINATOR
    if desired > available:
        return available, available
    return desired, UINT256_MAX


class LiquidationPlanner:
    """Builds executor parameters. No I/O."""

    def __init__(self, swap_router: str, wrapped_native: str):
        self.swap_router = swap_router
        self.wrapped_native = wrapped_native

    def plan(
        self,
        pool: str,
        user: str,
        collateral: CollateralHolding,
        debt: DebtHolding,
        available: int,
        receiver: str,
    ) -> LiquidationPlan:
        seize_amount, debt_to_cover = compute_seize_amounts(debt.amount, available)

        params = LiquidationParams(
            collateral_asset=collateral.underlying_asset,
            debt_asset=debt.underlying_asset,
            user=user,
            amount=seize_amount,
            transfer_amount=0,
            debt_to_cover=debt_to_cover,
        )
        swap = SwapParams(
            receiver=receiver,
            swap_router=self.swap_router,
            path1=[collateral.underlying_asset, debt.underlying_asset],
            path2=[debt.underlying_asset, self.wrapped_native],
        )

        logger.info(
            "Planner: user %s, debt %s of %s, seize %s of %s (available %s), debtToCover %s",
            user, debt.amount, debt.underlying_asset, seize_amount, collateral.underlying_asset, available,
            "max" if debt_to_cover == UINT256_MAX else debt_to_cover,
        )
        return LiquidationPlan(pool=pool, params=params, swap=swap)
