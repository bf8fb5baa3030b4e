"""Money value object with currency-aware arithmetic."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional

from fxmoney.core.exceptions import (
    InvalidComparisonError,
    InvalidDeclarationError,
    UnsupportedOperationError,
)
from fxmoney.services.exchange import CurrencyExchange, get_default_exchange
from fxmoney.utils.metrics import track_operation
from fxmoney.utils.numeric import DECIMAL_CONTEXT, Number, is_number, quantize, to_decimal


@dataclass(frozen=True, eq=False)
class Money:
    """
    Immutable amount tagged with a currency code.

    Attributes:
        amount: Decimal amount, any sign, no implicit rounding
        currency: Case-sensitive currency code
        exchange: Exchange consulted when converting to another currency

    Operations never mutate; each returns a new Money bound to the
    left operand's exchange.
    """

    amount: Decimal
    currency: str
    exchange: CurrencyExchange = field(repr=False)

    def __init__(self, amount: Number, currency: str, exchange: Optional[CurrencyExchange] = None) -> None:
        """
        Initialize Money object.

        Args:
            amount: Amount as int, float, Decimal or another real number
            currency: Non-empty currency code
            exchange: Exchange to convert with (default: process-wide exchange)

        Raises:
            InvalidDeclarationError: If amount is not a finite number or currency is empty
        """
        if not is_number(amount):
            raise InvalidDeclarationError(f"Amount must be a number, got {amount!r}")
        decimal_amount = to_decimal(amount)
        if not decimal_amount.is_finite():
            raise InvalidDeclarationError(f"Amount must be finite, got {amount!r}")

        if not isinstance(currency, str) or not currency.strip():
            raise InvalidDeclarationError("Currency must be specified")

        # Use __setattr__ because of frozen=True
        object.__setattr__(self, "amount", decimal_amount)
        object.__setattr__(self, "currency", currency)
        object.__setattr__(self, "exchange", exchange if exchange is not None else get_default_exchange())

    @classmethod
    def create(cls, amount: Number, currency: str, exchange: Optional[CurrencyExchange] = None) -> "Money":
        """Create a Money object."""
        return cls(amount, currency, exchange)

    def _new(self, amount: Decimal, currency: str = None) -> "Money":
        return Money(amount, currency or self.currency, self.exchange)

    def convert_to(self, currency: str) -> "Money":
        """
        Convert to another currency.

        Args:
            currency: Target currency code

        Returns:
            Self when the currency already matches, otherwise a new Money

        Raises:
            UnknownConversionError: If the exchange has no rate path to the currency
        """
        if currency == self.currency:
            return self
        return self._new(self.exchange.convert_amount(self.amount, self.currency, currency), currency)

    def _amount_of(self, other: "Money") -> Decimal:
        """Amount of other in this currency, using this Money's exchange."""
        return self.exchange.convert_amount(other.amount, other.currency, self.currency)

    def __add__(self, other: "Money") -> "Money":
        """Add Money, converting other into this currency."""
        if not isinstance(other, Money):
            raise UnsupportedOperationError(f"{other!r} must be Money to compute a sum")
        track_operation("add")
        other_amount = self._amount_of(other)
        with localcontext(DECIMAL_CONTEXT):
            return self._new(self.amount + other_amount)

    def __radd__(self, other) -> "Money":
        raise UnsupportedOperationError(f"{other!r} must be Money to compute a sum")

    def __sub__(self, other: "Money") -> "Money":
        """Subtract Money, converting other into this currency."""
        if not isinstance(other, Money):
            raise UnsupportedOperationError(f"{other!r} must be Money to compute a difference")
        track_operation("subtract")
        other_amount = self._amount_of(other)
        with localcontext(DECIMAL_CONTEXT):
            return self._new(self.amount - other_amount)

    def __rsub__(self, other) -> "Money":
        raise UnsupportedOperationError(f"{other!r} must be Money to compute a difference")

    def __mul__(self, multiplier: Number) -> "Money":
        """Multiply Money by a number."""
        if not is_number(multiplier):
            raise UnsupportedOperationError("Can only multiply Money by a number")
        track_operation("multiply")
        with localcontext(DECIMAL_CONTEXT):
            return self._new(self.amount * to_decimal(multiplier))

    def __rmul__(self, multiplier: Number) -> "Money":
        return self.__mul__(multiplier)

    def __truediv__(self, divisor: Number) -> "Money":
        """
        Divide Money by a number.

        Raises:
            UnsupportedOperationError: If divisor is not a number
            ZeroDivisionError: If divisor is zero
        """
        if not is_number(divisor):
            raise UnsupportedOperationError("Can only divide Money by a number")
        divisor = to_decimal(divisor)
        if divisor == 0:
            raise ZeroDivisionError("Cannot divide Money by zero")
        track_operation("divide")
        with localcontext(DECIMAL_CONTEXT):
            return self._new(self.amount / divisor)

    def __neg__(self) -> "Money":
        with localcontext(DECIMAL_CONTEXT):
            return self._new(-self.amount)

    def __pos__(self) -> "Money":
        with localcontext(DECIMAL_CONTEXT):
            return self._new(+self.amount)

    def __abs__(self) -> "Money":
        with localcontext(DECIMAL_CONTEXT):
            return self._new(abs(self.amount))

    def compare_to(self, other: "Money") -> int:
        """
        Three-way comparison after converting other into this currency.

        Returns:
            -1, 0 or 1

        Raises:
            InvalidComparisonError: If other is not Money
            UnknownConversionError: If other cannot be converted
        """
        if not isinstance(other, Money):
            raise InvalidComparisonError(f"Cannot compare Money with {type(other).__name__}")
        other_amount = self._amount_of(other)
        if self.amount < other_amount:
            return -1
        if self.amount > other_amount:
            return 1
        return 0

    def __eq__(self, other) -> bool:
        """Check equality in this currency."""
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare_to(other) == 0

    # Equality depends on conversion rates, so there is no stable hash
    __hash__ = None

    def __lt__(self, other: "Money") -> bool:
        """Less than comparison."""
        return self.compare_to(other) < 0

    def __le__(self, other: "Money") -> bool:
        """Less than or equal comparison."""
        return self.compare_to(other) <= 0

    def __gt__(self, other: "Money") -> bool:
        """Greater than comparison."""
        return self.compare_to(other) > 0

    def __ge__(self, other: "Money") -> bool:
        """Greater than or equal comparison."""
        return self.compare_to(other) >= 0

    def format(self) -> str:
        """Render as '20.00 USD', rounding half up to two decimals."""
        return f"{quantize(self.amount, 2):f} {self.currency}"

    def __repr__(self) -> str:
        """String representation."""
        return f"Money({self.amount}, {self.currency})"

    def __str__(self) -> str:
        """String representation."""
        return self.format()

    def to_decimal(self) -> Decimal:
        """Convert to Decimal."""
        return self.amount

    def quantize(self, decimal_places: int = 2) -> "Money":
        """Round to specified decimal places."""
        return self._new(quantize(self.amount, decimal_places))

    def is_zero(self) -> bool:
        """Check if amount is zero."""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive."""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative."""
        return self.amount < Decimal('0')


def parse_money(text: str, exchange: Optional[CurrencyExchange] = None) -> Money:
    """
    Parse text like '20.00 USD' into a Money object.

    Raises:
        InvalidDeclarationError: If text is not '<amount> <currency>'
    """
    if not isinstance(text, str):
        raise InvalidDeclarationError(f"Cannot parse Money from {text!r}")
    parts = text.split()
    if len(parts) != 2:
        raise InvalidDeclarationError(f"Money text must look like '<amount> <currency>', got {text!r}")

    amount_part, currency = parts
    try:
        amount = Decimal(amount_part)
    except InvalidOperation as e:
        raise InvalidDeclarationError(f"Invalid amount {amount_part!r} in {text!r}") from e
    return Money(amount, currency, exchange)


def zero_money(currency: str, exchange: Optional[CurrencyExchange] = None) -> Money:
    """Create zero Money object."""
    return Money(Decimal('0'), currency, exchange)
