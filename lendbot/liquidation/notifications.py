"""
Apprise notification functions for the liquidation bot.
"""

import time
from typing import List

from apprise import Apprise

from .config_loader import BotConfig
from .logging_config import setup_logger
from .models import DispatchResult, HealthRecord, LiquidationPlan
from .planner import UINT256_MAX

logger = setup_logger()


def setup_apprise_notification_object(config: BotConfig) -> Apprise:
    """Set up the Apprise notification engine."""
    apprise = Apprise()
    apprise.add(config.NOTIFICATION_URL)
    return apprise


def _notify(body: str, title: str, config: BotConfig) -> bool:
    if not config or not config.NOTIFICATION_URL:
        logger.debug("No NOTIFICATION_URL configured, skipping '%s'", title)
        return False

    apprise = setup_apprise_notification_object(config)
    return apprise.notify(body=body, title=title)


def _format_debt_to_cover(debt_to_cover: int) -> str:
    return "max" if debt_to_cover == UINT256_MAX else str(debt_to_cover)


def post_unhealthy_accounts_notification(records: List[HealthRecord], config: BotConfig) -> bool:
    """Post the unhealthy accounts found in a cycle."""
    message = f":warning: *{len(records)} Unhealthy Accounts Detected* :warning:\n\n"
    for i, record in enumerate(records, start=1):
        message += (
            f"{i}. `{record.user}` on pool `{record.pool}` "
            f"Health factor: `{record.health_score:.4f}`, Debt: `{record.total_debt_base}`\n"
        )
        if i >= 50:
            break
    message += f"\nTime of detection: {time.strftime('%Y-%m-%d %H:%M:%S')}\nNetwork: `{config.CHAIN_NAME}`"
    logger.info("Unhealthy accounts notification:\n%s", message)

    return _notify(message, "Unhealthy Accounts Detected", config)


def post_liquidation_plan_notification(plan: LiquidationPlan, config: BotConfig) -> bool:
    """Post a liquidation that was planned but not sent (dry run)."""
    message = (
        ":mag: *Liquidation Planned (dry run)* :mag:\n\n"
        f"*User*: `{plan.user}`\n"
        f"*Pool*: `{plan.pool}`\n"
        f"• Collateral Asset: `{plan.params.collateral_asset}`\n"
        f"• Debt Asset: `{plan.params.debt_asset}`\n"
        f"• Seize Amount: `{plan.seize_amount}`\n"
        f"• Debt To Cover: `{_format_debt_to_cover(plan.debt_to_cover)}`\n"
        f"Network: `{config.CHAIN_NAME}`"
    )
    logger.info("Liquidation plan notification:\n%s", message)

    return _notify(message, "Liquidation Planned", config)


def post_liquidation_result_notification(result: DispatchResult, config: BotConfig) -> bool:
    """Post a confirmed liquidation."""
    plan = result.plan
    liq_tx_url = f"{config.EXPLORER_URL}/tx/{result.tx_hash}"
    message = (
        ":moneybag: *Liquidation Completed* :moneybag:\n\n"
        f"*User*: `{plan.user}`\n"
        f"*Pool*: `{plan.pool}`\n"
        f"• Collateral Asset: `{plan.params.collateral_asset}`\n"
        f"• Debt Asset: `{plan.params.debt_asset}`\n"
        f"• Seize Amount: `{plan.seize_amount}`\n"
        f"• Debt To Cover: `{_format_debt_to_cover(plan.debt_to_cover)}`\n"
        f"• Liquidation Transaction: <{liq_tx_url}|View Transaction on Explorer>\n"
        f"Time of liquidation: {time.strftime('%Y-%m-%d %H:%M:%S')}\n\n"
        f"Network: `{config.CHAIN_NAME}`"
    )
    logger.info("Liquidation result notification:\n%s", message)

    return _notify(message, "Liquidation Completed", config)


def post_error_notification(message: str, config: BotConfig = None) -> bool:
    """Post an error notification."""
    error_message = f":rotating_light: *Error Notification* :rotating_light:\n\n{message}\n\n"
    error_message += f"Time: {time.strftime('%Y-%m-%d %H:%M:%S')}\n"
    if config:
        error_message += f"Network: `{config.CHAIN_NAME}`"

    logger.info("Error notification:\n%s", error_message)

    return _notify(error_message, "Error Notification", config)
