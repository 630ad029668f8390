"""
Creates and runs one liquidation cycle
"""

from .liquidation.bot_manager import LiquidationCycle
from .liquidation.config_loader import BotConfig, load_config
from .liquidation.models import CycleReport

__all__ = ["BotConfig", "CycleReport", "LiquidationCycle", "load_config", "run_cycle"]


def run_cycle(config: BotConfig, notify: bool = True, execute_liquidation: bool = True) -> CycleReport:
    """Run a single liquidation cycle for the configured chain"""
    cycle = LiquidationCycle(config, notify=notify, execute_liquidation=execute_liquidation)
    return cycle.run()
