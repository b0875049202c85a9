"""
Number parsing and formatting for scraped price/weight strings.
"""

import math
import re
from typing import Any, Optional

_LEADING_NUMBER = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def parse_number(value: Any) -> Optional[float]:
    """
    Parse the leading decimal number of a value.

    Accepts numbers and strings such as "19.99", " 2 kg" or "1e3".
    Booleans, empty values and non-finite results are rejected.

    Returns:
        Parsed float, or None if no number could be read
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return None
        number = float(match.group(1))
    return number if math.isfinite(number) else None


def format_number(number: float) -> str:
    """Shortest text for a number; integral values carry no '.0'."""
    if number == int(number) and abs(number) < 1e16:
        return str(int(number))
    return repr(number)


def to_number_string(value: Any, default: float = 0) -> str:
    """Normalize a price-like value to its numeric text, or the default."""
    number = parse_number(value)
    return format_number(number if number is not None else default)


def round_half_up(number: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(number + 0.5))


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer stock quantity, or None."""
    number = parse_number(value)
    return int(number) if number is not None else None
