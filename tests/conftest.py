"""Pytest configuration and fixtures."""

import pytest

from fxmoney.services.exchange import CurrencyExchange, default_exchange


@pytest.fixture(autouse=True)
def reset_default_exchange():
    """Start every test with an unconfigured process-wide exchange."""
    default_exchange.reset()
    yield
    default_exchange.reset()


@pytest.fixture
def exchange():
    """Exchange with USD as base and EUR at 0.8."""
    exchange = CurrencyExchange()
    exchange.configure("USD", {"EUR": 0.8})
    return exchange


@pytest.fixture
def cross_exchange():
    """Exchange with two non-base currencies for cross conversions."""
    exchange = CurrencyExchange(cross_rate_mode="via_base")
    exchange.configure("USD", {"EUR": 0.8, "GBP": 0.5})
    return exchange
