"""
Value coercion utilities shared by the constraint catalogue and the engine.

Records arrive as plain Python mappings, so a field value may be a string
read from a form or CSV file, a native number, a boolean, a list or a nested
mapping. These helpers answer the recurring questions ("does this look like
a number?", "is this empty?", "what is its text form?") in one place.
"""

import numbers
import re
from decimal import Decimal, InvalidOperation
from typing import Any

NUMERIC_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

TRUTHY_STRINGS = ("true", "1", "yes", "on")
FALSY_STRINGS = ("false", "0", "no", "off")


def is_number(value: Any) -> bool:
    """Return True for native numbers: int, float, Decimal, Fraction (bool is not a number here)."""
    return isinstance(value, numbers.Real | Decimal) and not isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    """
    Check whether a value is numeric.

    Native numbers are numeric. Strings are numeric when they look like a
    plain decimal number ("10", "-3.5"); exponents, leading "+" and
    surrounding whitespace are rejected.

    Examples:
        >>> is_numeric("10")
        True
        >>> is_numeric("1e5")
        False
        >>> is_numeric(2.5)
        True
    """
    if isinstance(value, Decimal):
        return not value.is_nan()
    if is_number(value):
        return value == value  # NaN is not a number for validation purposes
    if isinstance(value, str):
        return bool(NUMERIC_PATTERN.match(value))
    return False


def is_integer(value: Any) -> bool:
    """Check whether a value is an integer (native int, integral float, or digit string)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    if is_number(value):
        return float(value).is_integer()
    if isinstance(value, str):
        return bool(INTEGER_PATTERN.match(value))
    return False


def to_number(value: Any) -> float | None:
    """
    Convert a numeric value to float.

    Returns:
        The float value, or None when the value is not numeric
    """
    if not is_numeric(value):
        return None
    return float(value)


def to_decimal(value: Any) -> Decimal | None:
    """Convert a finite numeric value to Decimal, preserving the digits of its text form."""
    if not is_numeric(value):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def to_string(value: Any) -> str:
    """
    Convert a value to the text form used for comparisons.

    None becomes "", booleans become "true"/"false", integral floats keep
    their decimal point ("1.0"), everything else goes through str().
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def to_bool(value: Any) -> bool | None:
    """
    Interpret a value as a boolean.

    Returns:
        True/False when the value has an unambiguous boolean reading,
        None otherwise ("maybe" is neither)
    """
    if isinstance(value, bool):
        return value
    if is_number(value):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUTHY_STRINGS:
            return True
        if lowered in FALSY_STRINGS:
            return False
    return None


def is_empty(value: Any) -> bool:
    """
    Check whether a value counts as "not filled in".

    None, blank strings and empty collections are empty. Zero and False are
    present values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, list | tuple | dict | set | frozenset):
        return len(value) == 0
    return False


def format_number(value: float) -> str:
    """Render a float without a trailing ".0" for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
