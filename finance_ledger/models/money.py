"""
Money Arithmetic

Every amount, total and budget limit in the ledger is a plain
``decimal.Decimal``. This module holds the few operations the rest of
the system is allowed to perform on it.

DESIGN DECISION: Arithmetic runs in a dedicated context that traps
``Inexact``. A sum that would need rounding raises instead of silently
losing a cent. Binary floats never enter the ledger.
"""

import re
from decimal import (
    Context,
    Decimal,
    Inexact,
    InvalidOperation,
    Overflow,
)
from enum import Enum


# Optional sign, digits, optional fraction. No exponents, no NaN/Infinity.
_MONEY_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

_MONEY_CONTEXT = Context(
    prec=64,
    traps=[InvalidOperation, Inexact, Overflow],
)

ZERO = Decimal("0")

# Largest amount a single entry or limit may carry. Totals of any
# realistic ledger then stay far inside the context precision.
MAX_WHOLE_DIGITS = 15
MAX_FRACTION_DIGITS = 8


class MoneyParseError(ValueError):
    """Text could not be read as a decimal amount."""
    pass


class Sign(str, Enum):
    """Sign of a money value."""
    NEGATIVE = "negative"
    ZERO = "zero"
    POSITIVE = "positive"


def parse_money(text: str) -> Decimal:
    """
    Parse decimal numeral text into a money value.

    Accepts an optional sign and an optional fractional part
    (``"10"``, ``"-3"``, ``"+4.50"``, ``".5"``). Surrounding whitespace
    is ignored.

    Raises:
        MoneyParseError: If the text is not a plain decimal numeral, or
            has more digits than within_bounds() allows
    """
    if not isinstance(text, str):
        raise MoneyParseError(f"Not a decimal numeral: {text!r}")

    candidate = text.strip()
    if not _MONEY_PATTERN.match(candidate):
        raise MoneyParseError(f"Not a decimal numeral: {text!r}")

    value = Decimal(candidate)
    if not within_bounds(value):
        raise MoneyParseError(f"Amount out of range: {text!r}")
    return value


def within_bounds(value: Decimal) -> bool:
    """
    True if a finite value has at most MAX_WHOLE_DIGITS digits before
    the point and MAX_FRACTION_DIGITS after it.
    """
    if not value.is_finite():
        return False
    _, digits, exponent = value.as_tuple()
    whole = max(0, len(digits) + exponent)
    fraction = max(0, -exponent)
    return whole <= MAX_WHOLE_DIGITS and fraction <= MAX_FRACTION_DIGITS


def add(a: Decimal, b: Decimal) -> Decimal:
    """Exact sum of two amounts."""
    return _MONEY_CONTEXT.add(a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    """Exact difference ``a - b``."""
    return _MONEY_CONTEXT.subtract(a, b)


def total(amounts) -> Decimal:
    """Exact sum of an iterable of amounts (zero when empty)."""
    result = ZERO
    for amount in amounts:
        result = add(result, amount)
    return result


def sign(value: Decimal) -> Sign:
    """Classify a value as negative, zero or positive."""
    if value < 0:
        return Sign.NEGATIVE
    if value > 0:
        return Sign.POSITIVE
    return Sign.ZERO


def to_string(value: Decimal) -> str:
    """
    Canonical text for display and reports.

    Keeps the scale the value was entered with (``100.50`` stays
    ``100.50``) and never switches to scientific notation.
    """
    return format(value, "f")
