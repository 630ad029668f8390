"""
Custom exceptions for the liquidation bot.
"""


class LendBotError(Exception):
    """Base exception for all liquidation bot errors."""


class ConfigError(LendBotError):
    """Raised for configuration-related errors."""


class DataSourceError(LendBotError):
    """Raised when the indexed user list cannot be fetched or parsed."""


class BatchCallError(LendBotError):
    """Raised when a multicall batch reverts or returns malformed data."""


class LiquidationError(LendBotError):
    """Raised for errors during liquidation execution."""


class TransactionBuildError(LiquidationError):
    """Raised when building a liquidation transaction fails."""
