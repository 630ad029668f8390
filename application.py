"""
Start point for running one liquidation cycle
"""
import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from lendbot import load_config, run_cycle
from lendbot.liquidation.logging_config import global_exception_handler, set_log_file, setup_logger
from lendbot.liquidation.notifications import post_error_notification

logger = setup_logger()


def main() -> int:
    parser = argparse.ArgumentParser(description="Run one liquidation cycle")
    parser.add_argument("--chain-id", type=int, help="Chain ID (default: DEFAULT_CHAIN_ID from config.yaml)")
    parser.add_argument("--dry-run", action="store_true", help="Plan liquidations without sending them")
    parser.add_argument("--no-notify", action="store_true", help="Do not post notifications")
    args = parser.parse_args()

    sys.excepthook = global_exception_handler

    config = None
    exit_code = 0
    try:
        config = load_config(args.chain_id)
        set_log_file(config.LOGS_PATH)
        report = run_cycle(config, notify=not args.no_notify, execute_liquidation=not args.dry_run)
        logger.info(
            "Cycle finished: %s users, %s unhealthy, %s liquidated",
            report.users_scanned, len(report.unhealthy), len(report.liquidations),
        )
    except Exception as ex:
        logger.error("Liquidation cycle failed: %s", ex, exc_info=True)
        if config is not None and not args.no_notify:
            try:
                post_error_notification(f"Liquidation cycle failed: {ex}", config)
            except Exception as notify_ex:
                logger.error("Failed to post error notification: %s", notify_ex, exc_info=True)
        exit_code = 1
    finally:
        logger.info("finally")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
