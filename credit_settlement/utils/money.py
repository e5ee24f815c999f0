"""Currency arithmetic helpers"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CURRENCY_PRECISION = Decimal("0.01")


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Coerce user or wire input to a finite Decimal.

    Floats go through str() so 9999.5 becomes Decimal("9999.5") rather than
    its binary expansion. Returns None for anything non-numeric, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def quantize_currency(amount: Decimal) -> Decimal:
    """Round to currency precision (2dp, half-up)"""
    return amount.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def format_rate(rate: Decimal) -> str:
    """Render a percent rate without trailing zeros: 10.00 -> '10', 2.50 -> '2.5'"""
    normalized = rate.normalize()
    # normalize() turns 10 into 1E+1
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f")
