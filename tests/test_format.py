"""Tests for amount parsing and display formatting."""

from fractions import Fraction

import pytest

from timebank.domain.errors import InvalidRateError
from timebank.utils import format_minutes, format_rate, parse_minutes, parse_rate


@pytest.mark.parametrize(
    "text,expected",
    [
        ("90", 90),
        (" 45 ", 45),
        ("1,440", 1440),
        ("2h", 120),
        ("45m", 45),
        ("45min", 45),
        ("1h30m", 90),
        ("1h 30m", 90),
        ("1H30M", 90),
        ("1:30", 90),
        ("0:05", 5),
    ],
)
def test_parse_minutes(text, expected):
    assert parse_minutes(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.5", "-5", "1:75", "h", "30s"])
def test_parse_minutes_rejects(text):
    with pytest.raises(ValueError):
        parse_minutes(text)


def test_parse_rate():
    assert parse_rate("10") == Fraction(10)
    assert parse_rate("2.5%") == Fraction(5, 2)
    assert parse_rate(" 1/3 ") == Fraction(1, 3)


@pytest.mark.parametrize("text", ["-1", "lots", "%"])
def test_parse_rate_rejects(text):
    with pytest.raises(InvalidRateError):
        parse_rate(text)


def test_format_minutes():
    assert format_minutes(0) == "0h 0m"
    assert format_minutes(59) == "0h 59m"
    assert format_minutes(125) == "2h 5m"
    assert format_minutes(1440) == "24h 0m"


def test_format_rate():
    assert format_rate(Fraction(10)) == "10%"
    assert format_rate(Fraction(5, 2)) == "2.5%"
    assert format_rate(Fraction(0)) == "0%"
