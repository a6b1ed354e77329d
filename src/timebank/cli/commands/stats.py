"""Daily statistics command."""

import click
from timebank.cli.commands.history import KIND_CHOICES, build_filter
from timebank.cli.date_filters import date_filter_options, period_flags_from
from timebank.utils.time_format import format_minutes


@click.command("stats")
@click.option("--kind", type=click.Choice(KIND_CHOICES, case_sensitive=False), help="Only this kind of transaction")
@date_filter_options
@click.pass_context
def daily_stats(
    ctx,
    kind: str | None,
    start_date: str | None,
    end_date: str | None,
    last_7_days: bool,
    last_30_days: bool,
    this_week: bool,
    last_week: bool,
    this_month: bool,
    last_month: bool,
):
    """Show deposits, withdrawals and interest per day."""
    ledger = ctx.obj["ledger"]
    transaction_filter = build_filter(
        ctx,
        kind.lower() if kind else None,
        start_date,
        end_date,
        period_flags_from(
            last_7_days=last_7_days,
            last_30_days=last_30_days,
            this_week=this_week,
            last_week=last_week,
            this_month=this_month,
            last_month=last_month,
        ),
    )

    totals = ledger.daily_aggregate(transaction_filter)
    if not totals:
        click.echo("No activity found.")
        return

    click.echo(f"{'Date':<12} {'Deposited':>12} {'Withdrawn':>12} {'Interest':>12}")
    click.echo("-" * 51)
    for day, day_totals in totals.items():
        click.echo(
            f"{str(day):<12} {format_minutes(day_totals.deposit_total):>12} "
            f"{format_minutes(day_totals.withdraw_total):>12} "
            f"{format_minutes(day_totals.interest_total):>12}"
        )


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(daily_stats)
