"""Tests for the currency exchange service."""

import threading
from decimal import Decimal
from fractions import Fraction

import pytest
from pydantic import ValidationError

from fxmoney.core.config import settings
from fxmoney.core.exceptions import InvalidConfigurationError, UnknownConversionError
from fxmoney.core.money import Money
from fxmoney.services.exchange import (
    ConversionTable,
    CurrencyExchange,
    configure,
    default_exchange,
)


class TestConfigure:
    """Test conversion table configuration."""

    def test_configure(self):
        """Test the table is stored as Decimal factors."""
        exchange = CurrencyExchange()
        assert not exchange.is_configured
        exchange.configure("USD", {"EUR": 0.8, "BTC": 0.0001})

        assert exchange.is_configured
        assert exchange.table.base_currency == "USD"
        assert exchange.table.factors == {"EUR": Decimal("0.8"), "BTC": Decimal("0.0001")}
        assert exchange.table.currencies == ["USD", "BTC", "EUR"]

    def test_module_configure(self):
        """Test configure() sets up the process-wide exchange."""
        configure("EUR", {"USD": 1.11})
        assert default_exchange.table.base_currency == "EUR"
        assert Money(10, "EUR").convert_to("USD").amount == Decimal("11.10")

    def test_configure_replaces_table(self):
        """Test a second configure call replaces rather than merges."""
        exchange = CurrencyExchange()
        exchange.configure("USD", {"EUR": 0.8})
        exchange.configure("GBP", {"JPY": 190})

        assert exchange.table.base_currency == "GBP"
        assert exchange.table.factor_for("EUR") is None
        with pytest.raises(UnknownConversionError):
            exchange.convert_amount(Decimal("1"), "USD", "EUR")

    def test_configure_copies_factors(self):
        """Test later changes to the caller's mapping do not leak in."""
        factors = {"EUR": 0.8}
        exchange = CurrencyExchange()
        exchange.configure("USD", factors)
        factors["EUR"] = 2
        assert exchange.table.factor_for("EUR") == Decimal("0.8")

    @pytest.mark.parametrize("base_currency", [None, "", "  ", 1])
    def test_invalid_base(self, base_currency):
        """Test the base currency must be a non-empty string."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange().configure(base_currency, {"EUR": 0.4})

    @pytest.mark.parametrize("factors", [None, {}, [("EUR", 0.4)]])
    def test_invalid_factors_container(self, factors):
        """Test factors must be a non-empty mapping."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange().configure("USD", factors)

    @pytest.mark.parametrize("value", [None, "0.8", True, 0, -1, float("inf")])
    def test_invalid_factor_value(self, value):
        """Test each factor must be a positive finite number."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange().configure("USD", {"EUR": value, "BTC": 0.0001})

    def test_invalid_factor_key(self):
        """Test currency codes must be non-empty strings."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange().configure("USD", {"": 0.8})

    def test_base_in_factors(self):
        """Test the base currency cannot list its own factor."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange().configure("USD", {"USD": 1, "EUR": 0.8})

    def test_failed_configure_keeps_previous_table(self, exchange):
        """Test an invalid configuration leaves the table untouched."""
        with pytest.raises(InvalidConfigurationError):
            exchange.configure("USD", {"EUR": None})
        assert exchange.table.factor_for("EUR") == Decimal("0.8")

    def test_reset(self, exchange):
        """Test reset drops the table."""
        exchange.reset()
        assert exchange.table is None
        with pytest.raises(UnknownConversionError):
            exchange.convert_amount(Decimal("1"), "USD", "EUR")

    def test_fraction_factor(self):
        """Test factors may be any real number."""
        exchange = CurrencyExchange()
        exchange.configure("USD", {"EUR": Fraction(4, 5)})
        assert exchange.table.factor_for("EUR") == Decimal("0.8")

    def test_default_cross_rate_mode(self):
        """Test no cross rate mode means the configured default."""
        assert CurrencyExchange(cross_rate_mode=None).cross_rate_mode == settings.CROSS_RATE_MODE

    def test_unknown_cross_rate_mode(self):
        """Test the exchange rejects unknown cross rate modes."""
        with pytest.raises(InvalidConfigurationError):
            CurrencyExchange(cross_rate_mode="triangular")

    def test_table_is_frozen(self, exchange):
        """Test the snapshot cannot be reassigned."""
        with pytest.raises(ValidationError):
            exchange.table.base_currency = "EUR"

    def test_factors_are_read_only(self, exchange):
        """Test the factors mapping of a configured table cannot be changed."""
        with pytest.raises(TypeError):
            exchange.table.factors["EUR"] = Decimal("0")
        with pytest.raises(TypeError):
            del exchange.table.factors["EUR"]
        assert exchange.convert_amount(Decimal("10"), "USD", "EUR") == Decimal("8")


class TestConvertAmount:
    """Test conversion paths."""

    def test_identity(self):
        """Test same currency returns the amount even unconfigured."""
        assert CurrencyExchange().convert_amount(Decimal("5"), "XYZ", "XYZ") == Decimal("5")

    def test_from_base(self, exchange):
        assert exchange.convert_amount(Decimal("10"), "USD", "EUR") == Decimal("8")

    def test_to_base(self, exchange):
        assert exchange.convert_amount(Decimal("8"), "EUR", "USD") == Decimal("10")

    def test_missing_target(self, exchange):
        """Test an unknown target currency fails."""
        with pytest.raises(UnknownConversionError):
            exchange.convert_amount(Decimal("1"), "USD", "CHF")

    def test_missing_source(self, exchange):
        """Test an unknown source currency fails."""
        with pytest.raises(UnknownConversionError):
            exchange.convert_amount(Decimal("1"), "CHF", "USD")

    def test_cross_via_base(self, cross_exchange):
        """Test cross conversion goes through the base currency."""
        assert cross_exchange.convert_amount(Decimal("10"), "EUR", "GBP") == Decimal("6.25")

    def test_cross_round_trip(self, cross_exchange):
        """Test cross conversion round trip returns the original value."""
        gbp = Money(10, "EUR", cross_exchange).convert_to("GBP")
        assert gbp.convert_to("EUR").amount == Decimal("10")

    def test_cross_legacy_product(self):
        """Test the legacy mode multiplies both factors."""
        exchange = CurrencyExchange(cross_rate_mode="legacy_product")
        exchange.configure("USD", {"EUR": 0.8, "GBP": 0.5})
        assert exchange.convert_amount(Decimal("10"), "EUR", "GBP") == Decimal("4")

    def test_cross_missing_source(self, cross_exchange):
        """Test cross conversion needs both factors."""
        with pytest.raises(UnknownConversionError):
            cross_exchange.convert_amount(Decimal("1"), "CHF", "GBP")

    def test_cross_missing_target(self, cross_exchange):
        """Test cross conversion from a known currency to an unknown one fails."""
        with pytest.raises(UnknownConversionError):
            cross_exchange.convert_amount(Decimal("1"), "EUR", "CHF")

    def test_unconfigured(self):
        """Test conversion without a table fails."""
        with pytest.raises(UnknownConversionError):
            CurrencyExchange().convert_amount(Decimal("1"), "USD", "EUR")


class TestConversionTable:
    """Test the table snapshot directly."""

    def test_factor_for(self):
        table = ConversionTable(base_currency="USD", factors={"EUR": Decimal("0.8")})
        assert table.factor_for("EUR") == Decimal("0.8")
        assert table.factor_for("USD") is None


class TestConcurrentConfigure:
    """Test table replacement while converting from other threads."""

    def test_readers_see_consistent_tables(self):
        """Test a reader never mixes base and factors from two tables."""
        exchange = CurrencyExchange()
        exchange.configure("USD", {"EUR": 2})
        errors = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                table = exchange.table
                # Each table maps its base to a single other currency
                if table.base_currency == "USD" and "EUR" not in table.factors:
                    errors.append(table)
                if table.base_currency == "GBP" and "JPY" not in table.factors:
                    errors.append(table)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for i in range(200):
            if i % 2:
                exchange.configure("USD", {"EUR": 2})
            else:
                exchange.configure("GBP", {"JPY": 190})
        stop.set()
        for thread in threads:
            thread.join()

        assert errors == []
