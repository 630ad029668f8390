"""
One liquidation cycle: fetch users, find unhealthy positions, plan and send liquidations.
"""

from typing import Optional

from .config_loader import BotConfig
from .contracts import create_contract_instance
from .dispatcher import LiquidationDispatcher
from .health import AccountHealthEvaluator
from .indexer import IndexerClient
from .logging_config import setup_logger
from .models import CycleReport, HealthRecord
from .multicall import BatchCallExecutor
from .notifications import (
    post_liquidation_plan_notification,
    post_liquidation_result_notification,
    post_unhealthy_accounts_notification,
)
from .planner import LiquidationPlanner
from .positions import PositionInspector

logger = setup_logger()


class LiquidationCycle:
    """
    Runs the pipeline once. Candidates are handled one at a time in discovery
    order and the first failure aborts the rest of the cycle.
    """

    def __init__(
        self,
        config: BotConfig,
        notify: bool = True,
        execute_liquidation: bool = True,
        indexer: Optional[IndexerClient] = None,
        executor: Optional[BatchCallExecutor] = None,
        dispatcher: Optional[LiquidationDispatcher] = None,
    ):
        self.config = config
        self.notify = notify
        self.execute_liquidation = execute_liquidation

        self.indexer = indexer or IndexerClient.from_config(config)
        self.executor = executor or BatchCallExecutor(config.multicall)
        self.dispatcher = dispatcher or LiquidationDispatcher(config)

        pool_interface = create_contract_instance(None, config.POOL_ABI_PATH, config.w3)
        token_interface = create_contract_instance(None, config.BEARING_TOKEN_ABI_PATH, config.w3)

        self.evaluator = AccountHealthEvaluator(self.executor, pool_interface)
        self.inspector = PositionInspector(self.executor, token_interface, config.ERC20_ABI_PATH)
        self.planner = LiquidationPlanner(config.ROUTER, config.WRAPPED_NATIVE)

    def run(self) -> CycleReport:
        report = CycleReport()

        users = self.indexer.fetch_users()
        report.users_scanned = len(users)

        report.unhealthy = self.evaluator.find_unhealthy(users, self.config.pool_addresses)
        logger.info(
            "LiquidationCycle: %s of %s users unhealthy across %s pools",
            len(report.unhealthy), len(users), len(self.config.POOLS),
        )

        if report.unhealthy and self.notify:
            self._safe_notify(post_unhealthy_accounts_notification, report.unhealthy)

        for record in report.unhealthy:
            self._process(record, report)

        logger.info(
            "LiquidationCycle: done, %s planned, %s liquidated, %s skipped",
            len(report.planned), len(report.liquidations), len(report.skipped),
        )
        return report

    def _process(self, record: HealthRecord, report: CycleReport) -> None:
        pool_config = self.config.pool(record.pool)

        snapshot = self.inspector.inspect(record, pool_config)
        selection = snapshot.select()
        if selection is None:
            logger.info("LiquidationCycle: no collateral/debt pair found for %s, skipping", record.user)
            report.skipped.append(record)
            return

        collateral, debt = selection
        available = self.inspector.available_collateral(collateral)
        plan = self.planner.plan(
            record.pool, record.user, collateral, debt, available, self.config.LIQUIDATOR_ADDRESS
        )
        report.planned.append(plan)

        if not self.execute_liquidation:
            logger.info("LiquidationCycle: dry run, not sending liquidation of %s", record.user)
            if self.notify:
                self._safe_notify(post_liquidation_plan_notification, plan)
            return

        result = self.dispatcher.dispatch(plan, pool_config.executor)
        report.liquidations.append(result)
        if self.notify:
            self._safe_notify(post_liquidation_result_notification, result)

    def _safe_notify(self, post, payload) -> None:
        try:
            post(payload, self.config)
        except Exception as ex:
            logger.error("LiquidationCycle: failed to post notification: %s", ex, exc_info=True)
