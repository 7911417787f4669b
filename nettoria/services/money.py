"""
Money Utilities - Safe Decimal operations for monetary values.

Storefront prices are whole units of the local currency (Toman/Rial), so
every public helper here returns either a Decimal or a plain int.
"""
import re
from decimal import Context, Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal, None]

INTEGER_PRECISION = Decimal("1")

# Longest number accepted for a price, quantity or duration; longer input is
# unparsable. Totals (price x duration, plus tax) stay under the interpreter's
# int/str conversion limit, so they still serialize to JSON.
MAX_DIGITS = 1000
_NUMBER_LIMIT = 10 ** MAX_DIGITS

# Exact for every product of two accepted numbers
MONEY_CONTEXT = Context(prec=4 * MAX_DIGITS, rounding=ROUND_HALF_EVEN)

# Persian and Arabic-Indic digits map onto ASCII before digit stripping
_DIGIT_TRANSLATION = str.maketrans(
    "۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩",
    "01234567890123456789",
)
_NON_DIGITS = re.compile(r"[^0-9]")
_LEADING_INT = re.compile(r"^\s*([+-]?)0*(\d+)")


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """
    Round a monetary value to a whole unit (half to even).

    Raises InvalidOperation for values too large for MONEY_CONTEXT or
    non-finite ones.
    """
    return to_decimal(value).quantize(
        INTEGER_PRECISION, rounding=ROUND_HALF_EVEN, context=MONEY_CONTEXT
    )


def to_int(value: Number) -> int:
    """Round and convert to int for JSON output and storage."""
    return int(round_money(value))


def parse_price(value: Number) -> int:
    """
    Normalize a price coming from a catalog card, a form or storage.

    Integers are kept as-is, other numbers are rounded to a whole unit, and
    negatives clamp at zero. Anything else is stringified and stripped of
    every non-digit character, so "599,000 تومان" becomes 599000. An empty
    result, or one longer than MAX_DIGITS, is 0.
    """
    if isinstance(value, bool) or value is None:
        return 0

    if isinstance(value, int):
        amount = value
    elif isinstance(value, (float, Decimal)):
        try:
            amount = to_int(value)
        except (InvalidOperation, ValueError, OverflowError):
            return 0
    else:
        digits = _NON_DIGITS.sub("", str(value).translate(_DIGIT_TRANSLATION)).lstrip("0")
        if not digits or len(digits) > MAX_DIGITS:
            return 0
        amount = int(digits)

    return amount if 0 < amount < _NUMBER_LIMIT else 0


def parse_positive_int(value, default: int = 1) -> int:
    """
    Parse a leading integer (quantity, duration, ip count).

    Unparsable input, values below 1 and values longer than MAX_DIGITS fall
    back to ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, (float, Decimal)):
        try:
            parsed = int(value) if abs(value) < _NUMBER_LIMIT else default
        except (ValueError, OverflowError, InvalidOperation):
            return default
    else:
        match = _LEADING_INT.match(str(value).translate(_DIGIT_TRANSLATION))
        if not match or len(match.group(2)) > MAX_DIGITS:
            return default
        parsed = int(match.group(1) + match.group(2))

    return parsed if 1 <= parsed < _NUMBER_LIMIT else default


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return MONEY_CONTEXT.multiply(to_decimal(value), to_decimal(factor))


def subtract(a: Number, b: Number) -> Decimal:
    """Safe subtraction of monetary values."""
    return MONEY_CONTEXT.subtract(to_decimal(a), to_decimal(b))


def format_money(value: Number, currency: str = "تومان") -> str:
    """
    Format a monetary value with digit grouping and a currency label.

    Args:
        value: Value to format
        currency: Label appended after the amount

    Returns:
        Formatted string, e.g. "599,000 تومان"
    """
    return f"{to_int(value):,} {currency}"
