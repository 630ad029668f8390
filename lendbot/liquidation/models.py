"""
Data classes for structured returns in the liquidation bot.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class BatchCall:
    """A single read-only call queued for the multicall aggregator."""

    target: str
    call_data: bytes


@dataclass(frozen=True)
class BatchResult:
    """Raw results of an aggregated call, in request order."""

    block_number: int
    return_data: List[bytes]


@dataclass(frozen=True)
class HealthRecord:
    """Health factor of one user on one pool, scaled by 1e18."""

    user: str
    pool: str
    health_factor: int
    total_collateral_base: int = 0
    total_debt_base: int = 0

    @property
    def health_score(self) -> float:
        return self.health_factor / 1e18


@dataclass(frozen=True)
class TokenBalance:
    """Balance of a user on a bearing token, paired with the token's underlying asset."""

    token: str
    underlying_asset: str
    balance: int


@dataclass(frozen=True)
class CollateralHolding:
    bearing_token: str
    underlying_asset: str
    amount: int


@dataclass(frozen=True)
class DebtHolding:
    underlying_asset: str
    amount: int


@dataclass
class PositionSnapshot:
    """Nonzero collateral and debt holdings of a user on a pool, in configured token order."""

    user: str
    pool: str
    collateral: List[CollateralHolding] = field(default_factory=list)
    debt: List[DebtHolding] = field(default_factory=list)

    def select(self) -> Optional[Tuple[CollateralHolding, DebtHolding]]:
        """
        Pick the holdings to liquidate against.

        Returns the first collateral and the first debt holding, or None when
        either side is empty.
        """
        if not self.collateral or not self.debt:
            return None
        return self.collateral[0], self.debt[0]


@dataclass(frozen=True)
class LiquidationParams:
    """First argument of the executor's `execute` entry point."""

    collateral_asset: str
    debt_asset: str
    user: str
    amount: int
    transfer_amount: int
    debt_to_cover: int

    def as_tuple(self) -> Tuple[Any, ...]:
        return (
            self.collateral_asset,
            self.debt_asset,
            self.user,
            self.amount,
            self.transfer_amount,
            self.debt_to_cover,
        )


@dataclass(frozen=True)
class SwapParams:
    """Second argument of the executor's `execute` entry point."""

    receiver: str
    swap_router: str
    path1: List[str]
    path2: List[str]

    def as_tuple(self) -> Tuple[Any, ...]:
        return (self.receiver, self.swap_router, list(self.path1), list(self.path2))


@dataclass(frozen=True)
class LiquidationPlan:
    """Liquidation and swap parameters for one unhealthy user."""

    pool: str
    params: LiquidationParams
    swap: SwapParams

    @property
    def user(self) -> str:
        return self.params.user

    @property
    def seize_amount(self) -> int:
        return self.params.amount

    @property
    def debt_to_cover(self) -> int:
        return self.params.debt_to_cover


@dataclass
class DispatchResult:
    """Outcome of a confirmed liquidation transaction."""

    plan: LiquidationPlan
    tx_hash: str
    receipt: Any


@dataclass
class CycleReport:
    """Summary of one liquidation cycle."""

    users_scanned: int = 0
    unhealthy: List[HealthRecord] = field(default_factory=list)
    skipped: List[HealthRecord] = field(default_factory=list)
    planned: List[LiquidationPlan] = field(default_factory=list)
    liquidations: List[DispatchResult] = field(default_factory=list)
