"""Immutable money values with static-rate currency conversion."""

__version__ = "1.0.0"

from fxmoney.core.config import Settings, settings
from fxmoney.core.exceptions import (
    InvalidComparisonError,
    InvalidConfigurationError,
    InvalidDeclarationError,
    MoneyError,
    UnknownConversionError,
    UnsupportedOperationError,
)
from fxmoney.core.logging import get_logger, setup_logging
from fxmoney.core.money import Money, parse_money, zero_money
from fxmoney.services.exchange import (
    ConversionTable,
    CurrencyExchange,
    configure,
    default_exchange,
    get_default_exchange,
)

__all__ = [
    "Money",
    "parse_money",
    "zero_money",
    "ConversionTable",
    "CurrencyExchange",
    "configure",
    "default_exchange",
    "get_default_exchange",
    "MoneyError",
    "InvalidDeclarationError",
    "InvalidConfigurationError",
    "UnknownConversionError",
    "UnsupportedOperationError",
    "InvalidComparisonError",
    "Settings",
    "settings",
    "setup_logging",
    "get_logger",
]
