"""Utility functions for timebank."""

from timebank.utils.date_parser import parse_date
from timebank.utils.amount_parser import parse_minutes, parse_rate
from timebank.utils.time_format import format_minutes, format_rate

__all__ = ["parse_date", "parse_minutes", "parse_rate", "format_minutes", "format_rate"]
