"""
Logging configuration for the liquidation bot.

The "lendbot" logger writes to the console from import time. Once a chain
config is loaded, `set_log_file` adds the per-chain log file.
"""

import logging
import traceback
from pathlib import Path
from typing import Any

LOGGER_NAME = "lendbot"

STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


class DetailedExceptionFormatter(logging.Formatter):
    """Formatter that adds the source location to ERROR and above."""

    def __init__(self) -> None:
        super().__init__()
        self._detailed = logging.Formatter(DETAILED_FORMAT)
        self._standard = logging.Formatter(STANDARD_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.ERROR:
            return self._detailed.format(record)
        return self._standard.format(record)


def setup_logger() -> logging.Logger:
    """
    Return the bot logger, adding the console handler on first use.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(DetailedExceptionFormatter())
    logger.addHandler(console_handler)

    return logger


def set_log_file(logs_path: str) -> logging.FileHandler:
    """
    Send the bot logger's output to `logs_path` as well as the console.

    A file handler added by an earlier call is closed and replaced, so a
    process only ever appends to one log file.

    Args:
        logs_path: Path of the log file, usually BotConfig.LOGS_PATH.

    Returns:
        The file handler now attached to the logger.
    """
    logger = setup_logger()

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    Path(logs_path).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(logs_path, mode="a")
    file_handler.setFormatter(DetailedExceptionFormatter())
    logger.addHandler(file_handler)

    logger.debug("Logging to %s", logs_path)
    return file_handler


def global_exception_handler(exctype: type, value: BaseException, tb: Any) -> None:
    """
    Global exception handler to log uncaught exceptions.

    Args:
        exctype: The type of the exception.
        value: The exception instance.
        tb: A traceback object encapsulating the call stack.
    """
    logger = logging.getLogger(LOGGER_NAME)
    trace_str = "".join(traceback.format_exception(exctype, value, tb))
    logger.critical("Uncaught exception:\n %s", trace_str)
