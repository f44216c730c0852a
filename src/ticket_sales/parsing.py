"""Total parse functions for loosely typed source fields.

Upstream records carry ids, quantities and money totals either as numbers or
as strings. Every function here accepts any value and never raises: values
that cannot be read degrade to None (totals, ids) or 0 (quantities).

Key utilities:
- canonical_id: compare ids typed as 6, 6.0 or "6" as the same key
- parse_total: decimal parse with a leading-number rule (like JS parseFloat)
- parse_quantity: base-10 integer parse, clamped to >= 0

Examples:
    >>> parse_total("1250.50")
    1250.5
    >>> parse_total("abc") is None
    True
    >>> parse_quantity("25")
    25
    >>> canonical_id(6.0) == canonical_id(" 6 ")
    True
"""

from __future__ import annotations

import math
import numbers
import re
from decimal import Decimal, InvalidOperation
from typing import Any

# Leading decimal number: "12.5abc" -> 12.5, ".5" -> 0.5, "1e3" -> 1000
_DECIMAL_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Leading base-10 integer: "25" -> 25, "25.9" -> 25, "7 seats" -> 7
_INTEGER_PREFIX_RE = re.compile(r"^[+-]?\d+")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid amount
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def canonical_id(value: Any) -> str | None:
    """Return a canonical string key for an id typed as number or string.

    Integral numbers and integral numeric strings collapse to their integer
    form, other values are stripped strings.

    Args:
        value: Raw id value.

    Returns:
        Canonical string key, or None for missing/blank ids.

    Examples:
        >>> canonical_id(13)
        '13'
        >>> canonical_id("13.0")
        '13'
        >>> canonical_id("a1b2")
        'a1b2'
    """
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        number = float(value)
        if not math.isfinite(number):
            return None
        return str(int(number)) if number.is_integer() else repr(number)

    text = str(value).strip()
    if not text:
        return None
    try:
        number_dec = Decimal(text)
    except InvalidOperation:
        return text
    if number_dec.is_finite() and number_dec == number_dec.to_integral_value():
        return str(int(number_dec))
    return text


def parse_total(value: Any) -> float | None:
    """Parse a money total into a finite float.

    Numbers are used directly. Strings are read up to the end of their
    leading decimal number, so "150.5 EGP" gives 150.5.

    Args:
        value: Raw total (number, numeric string, or anything else).

    Returns:
        Parsed finite float, or None if the value is not a finite number.

    Examples:
        >>> parse_total(99)
        99.0
        >>> parse_total(" 12.75 ")
        12.75
        >>> parse_total(float("nan")) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None

    match = _DECIMAL_PREFIX_RE.match(str(value).strip())
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def parse_quantity(value: Any) -> int:
    """Parse a line-item quantity into a non-negative integer.

    Args:
        value: Raw quantity (int, float, numeric string, None...).

    Returns:
        Parsed quantity; 0 when absent, unparsable or negative.

    Examples:
        >>> parse_quantity("3")
        3
        >>> parse_quantity(2.9)
        2
        >>> parse_quantity("-4")
        0
        >>> parse_quantity(None)
        0
    """
    if value is None or isinstance(value, bool):
        return 0
    if _is_number(value):
        number = float(value)
        if not math.isfinite(number):
            return 0
        return max(int(number), 0)

    match = _INTEGER_PREFIX_RE.match(str(value).strip())
    if not match:
        return 0
    return max(int(match.group(0)), 0)


def clean_name(value: Any) -> str | None:
    """Trim a display name; blank or missing names give None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
