"""Formatting helpers for minute amounts and rates."""

from fractions import Fraction


def format_minutes(minutes: int) -> str:
    """Render minutes as hours and minutes, e.g. 125 -> "2h 5m"."""
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"


def format_rate(rate: Fraction) -> str:
    """Render a percentage rate for display, e.g. 5/2 -> "2.5%"."""
    if rate.denominator == 1:
        return f"{rate.numerator}%"
    return f"{float(rate):g}%"
