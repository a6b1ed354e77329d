"""Amount parsing utilities."""

import re
from fractions import Fraction

from timebank.domain.accrual import coerce_rate

_HOURS_MINUTES = re.compile(r"^(?:(\d+)\s*h)?\s*(?:(\d+)\s*m(?:in)?)?$")
_CLOCK = re.compile(r"^(\d+):([0-5]\d)$")


def parse_minutes(amount_str: str) -> int:
    """Parse a duration string into whole minutes.

    Handles various formats:
    - "90"
    - "1,440"
    - "1h30m", "1h 30m", "2h", "45m", "45min"
    - "1:30" (hours:minutes)

    Args:
        amount_str: Duration string

    Returns:
        Number of minutes

    Raises:
        ValueError: If the string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip().lower().replace(",", "")

    if amount_str.isdigit():
        return int(amount_str)

    match = _CLOCK.match(amount_str)
    if match:
        return int(match.group(1)) * 60 + int(match.group(2))

    match = _HOURS_MINUTES.match(amount_str)
    if match and (match.group(1) or match.group(2)):
        hours = int(match.group(1) or 0)
        minutes = int(match.group(2) or 0)
        return hours * 60 + minutes

    raise ValueError(f"Could not parse amount '{amount_str}': expected minutes like 90, 1h30m or 1:30")


def parse_rate(rate_str: str) -> Fraction:
    """Parse a daily interest rate such as "10", "2.5", "2.5%" or "1/3".

    Raises:
        InvalidRateError: If the rate is negative or not a number
    """
    rate_str = rate_str.strip()
    if rate_str.endswith("%"):
        rate_str = rate_str[:-1]
    return coerce_rate(rate_str)
