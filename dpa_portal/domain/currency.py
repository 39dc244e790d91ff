"""Currency value parsing and formatting"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_NUMERIC_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def parse_amount(value: str | int | float | Decimal | None) -> Decimal:
    """
    Normalize a monetary value from the backend into a Decimal.

    - None -> 0
    - numbers pass through (floats via their shortest repr, so 0.1 stays 0.1)
    - strings drop every character except digits, "." and "-", then the
      longest leading number is read ("1.2.3" -> 1.2, "5-3" -> 5)
    - anything unparseable or non-finite -> 0
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        parsed = Decimal(repr(value))
        return parsed if parsed.is_finite() else ZERO

    match = _NUMERIC_PREFIX.match(_NON_NUMERIC.sub("", str(value)))
    if match is None:
        return ZERO

    try:
        parsed = Decimal(match.group())
    except InvalidOperation:
        return ZERO

    return parsed if parsed.is_finite() else ZERO


def to_cents(value: Decimal) -> Decimal:
    """Quantize to two decimal places, half-up, whatever the magnitude"""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value: str | int | float | Decimal | None) -> str:
    """
    Render an amount with thousands separators and exactly two decimals.

    Example: 100000 -> "100,000.00"
    """
    return f"{to_cents(parse_amount(value)):,.2f}"
