"""CLI helpers for date range resolution."""

from datetime import date

import click

from timebank.domain.entities import DateRange
from timebank.utils.date_parser import get_date_range, parse_date

TRAILING_PERIODS = {"last-7-days": 7, "last-30-days": 30}


def date_filter_options(command):
    """Attach the shared date range options to a command."""
    options = [
        click.option("--start-date", help="Start date, inclusive (YYYY-MM-DD or relative like '3 days ago')"),
        click.option("--end-date", help="End date, inclusive (YYYY-MM-DD or relative like 'today')"),
        click.option("--last-7-days", is_flag=True, help="Only the last 7 days"),
        click.option("--last-30-days", is_flag=True, help="Only the last 30 days"),
        click.option("--this-week", is_flag=True, help="Filter to current week"),
        click.option("--last-week", is_flag=True, help="Filter to previous week"),
        click.option("--this-month", is_flag=True, help="Filter to current month"),
        click.option("--last-month", is_flag=True, help="Filter to previous month"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    today: date,
) -> DateRange:
    """Resolve a DateRange from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--last-7-days, --last-30-days, --this-week, --last-week, --this-month, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--last-7-days, --this-month, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        period = next(name for name, is_set in period_flags.items() if is_set)
        if period in TRAILING_PERIODS:
            return DateRange.trailing(TRAILING_PERIODS[period])
        start, end = get_date_range(period, today=today)
        return DateRange.between(start, end)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return DateRange(start=start, end=end)


def period_flags_from(**flags: bool) -> dict[str, bool]:
    """Map click flag parameters (last_7_days=...) to period names (last-7-days)."""
    return {name.replace("_", "-"): bool(value) for name, value in flags.items()}
