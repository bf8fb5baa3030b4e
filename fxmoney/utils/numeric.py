"""Numeric helpers shared by Money and the conversion table."""

import numbers
from decimal import Context, Decimal, ROUND_HALF_UP, localcontext
from typing import Union

from fxmoney.core.config import settings

Number = Union[int, float, Decimal, numbers.Real]

# All Money arithmetic runs in this context, never in the caller's
DECIMAL_CONTEXT = Context(prec=settings.DECIMAL_PRECISION, rounding=ROUND_HALF_UP)


def is_number(value) -> bool:
    """
    Return True for real numbers: int, float, Decimal, Fraction and any
    other numbers.Real (numpy scalars included). bool is excluded.
    """
    if isinstance(value, bool):
        return False
    return isinstance(value, (Decimal, numbers.Real))


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through str() first so 0.1 becomes Decimal("0.1")
    rather than its binary expansion. Fractions are divided out in
    DECIMAL_CONTEXT.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, numbers.Rational):
        return DECIMAL_CONTEXT.divide(Decimal(int(value.numerator)), Decimal(int(value.denominator)))
    return Decimal(str(float(value)))


def quantize(amount: Decimal, decimal_places: int) -> Decimal:
    """
    Round half up to a fixed number of decimal places.

    Precision grows with the amount so large values never overflow it.
    """
    digits = max(amount.adjusted() + 1, 1) + decimal_places
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = max(ctx.prec, digits + 1)
        return amount.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)
