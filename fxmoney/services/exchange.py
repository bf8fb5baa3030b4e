"""Currency exchange service holding the conversion table."""

from collections.abc import Mapping
from decimal import Decimal, localcontext
from threading import Lock
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from fxmoney.core.config import settings
from fxmoney.core.exceptions import InvalidConfigurationError, UnknownConversionError
from fxmoney.core.logging import get_logger
from fxmoney.utils.metrics import track_conversion, track_table_update
from fxmoney.utils.numeric import DECIMAL_CONTEXT, Number, is_number, to_decimal

logger = get_logger(__name__)

VIA_BASE = "via_base"
LEGACY_PRODUCT = "legacy_product"
CROSS_RATE_MODES = (VIA_BASE, LEGACY_PRODUCT)


class ConversionTable(BaseModel):
    """
    Immutable snapshot of conversion rates.

    Each factor is the number of units of that currency equal to one unit
    of the base currency.
    """

    model_config = ConfigDict(frozen=True)

    base_currency: str
    factors: Mapping[str, Decimal]

    @field_validator("base_currency", mode="before")
    @classmethod
    def validate_base_currency(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"Base currency must be a non-empty string, got {v!r}")
        return v

    @field_validator("factors", mode="before")
    @classmethod
    def validate_factors(cls, v):
        if not isinstance(v, Mapping) or not v:
            raise ValueError("Conversion factors must be a non-empty mapping")

        factors = {}
        for code, factor in v.items():
            if not isinstance(code, str) or not code.strip():
                raise ValueError(f"Currency code must be a non-empty string, got {code!r}")
            if not is_number(factor):
                raise ValueError(f"Conversion factor for {code} must be a number, got {factor!r}")
            decimal_factor = to_decimal(factor)
            if not decimal_factor.is_finite() or decimal_factor <= 0:
                raise ValueError(f"Conversion factor for {code} must be positive, got {factor!r}")
            factors[code] = decimal_factor
        return factors

    @model_validator(mode="after")
    def validate_base_not_in_factors(self):
        if self.base_currency in self.factors:
            raise ValueError(f"Base currency {self.base_currency} cannot have its own conversion factor")
        # Read-only view, the frozen model only guards reassignment
        object.__setattr__(self, "factors", MappingProxyType(dict(self.factors)))
        return self

    @property
    def currencies(self) -> list[str]:
        """All currencies reachable through this table, base first."""
        return [self.base_currency] + sorted(self.factors)

    def factor_for(self, currency: str) -> Optional[Decimal]:
        return self.factors.get(currency)


class CurrencyExchange:
    """Service converting amounts between currencies using a conversion table."""

    def __init__(self, cross_rate_mode: Optional[str] = None):
        """
        Initialize an unconfigured exchange.

        Args:
            cross_rate_mode: How two non-base currencies are converted,
                "via_base" or "legacy_product" (default: settings.CROSS_RATE_MODE)

        Raises:
            InvalidConfigurationError: If cross_rate_mode is unknown
        """
        cross_rate_mode = cross_rate_mode or settings.CROSS_RATE_MODE
        if cross_rate_mode not in CROSS_RATE_MODES:
            raise InvalidConfigurationError(
                f"Unknown cross rate mode {cross_rate_mode!r}, expected one of {CROSS_RATE_MODES}"
            )
        self.cross_rate_mode = cross_rate_mode
        self._table: Optional[ConversionTable] = None
        self._lock = Lock()

    @property
    def table(self) -> Optional[ConversionTable]:
        """Current conversion table, or None when unconfigured."""
        with self._lock:
            return self._table

    @property
    def is_configured(self) -> bool:
        return self.table is not None

    def configure(self, base_currency: str, factors: Mapping[str, Number]) -> None:
        """
        Replace the conversion table.

        Args:
            base_currency: Currency all factors are expressed against
            factors: Mapping of currency code to units per one base unit

        Raises:
            InvalidConfigurationError: If the base currency or factors are invalid
        """
        try:
            table = ConversionTable(base_currency=base_currency, factors=factors)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid conversion table: {e}") from e

        with self._lock:
            self._table = table

        track_table_update()
        logger.info(
            "Conversion table configured",
            base_currency=table.base_currency,
            currencies=sorted(table.factors),
        )

    def reset(self) -> None:
        """Drop the conversion table."""
        with self._lock:
            self._table = None
        logger.info("Conversion table reset")

    def convert_amount(self, amount: Decimal, source: str, target: str) -> Decimal:
        """
        Convert an amount from one currency to another.

        Args:
            amount: Amount in the source currency
            source: Source currency code
            target: Target currency code

        Returns:
            Amount in the target currency

        Raises:
            UnknownConversionError: If no rate path exists between the currencies
        """
        if source == target:
            track_conversion("identity", "success")
            return amount

        table = self.table
        if table is None:
            track_conversion("cross", "unknown")
            logger.debug("Conversion without table", source=source, target=target)
            raise UnknownConversionError(
                f"Cannot convert {source} to {target}: no conversion table configured"
            )

        if source == table.base_currency:
            path = "from_base"
            factor = self._lookup(table, target, path, source, target)
            with localcontext(DECIMAL_CONTEXT):
                result = amount * factor
        elif target == table.base_currency:
            path = "to_base"
            factor = self._lookup(table, source, path, source, target)
            with localcontext(DECIMAL_CONTEXT):
                result = amount / factor
        else:
            path = "cross"
            source_factor = self._lookup(table, source, path, source, target)
            target_factor = self._lookup(table, target, path, source, target)
            with localcontext(DECIMAL_CONTEXT):
                if self.cross_rate_mode == LEGACY_PRODUCT:
                    result = amount * source_factor * target_factor
                else:
                    result = amount / source_factor * target_factor

        track_conversion(path, "success")
        return result

    def _lookup(self, table: ConversionTable, currency: str, path: str, source: str, target: str) -> Decimal:
        factor = table.factor_for(currency)
        if factor is None:
            track_conversion(path, "unknown")
            logger.debug("Unknown conversion", source=source, target=target, missing=currency)
            raise UnknownConversionError(f"Conversion rate not specified for {currency}")
        return factor


# Process-wide exchange used by Money values created without an explicit one
default_exchange = CurrencyExchange()


def configure(base_currency: str, factors: Mapping[str, Number]) -> None:
    """Configure the process-wide conversion table."""
    default_exchange.configure(base_currency, factors)


def get_default_exchange() -> CurrencyExchange:
    return default_exchange
