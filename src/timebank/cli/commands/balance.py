"""Balance command."""

import click
from timebank.utils.time_format import format_minutes, format_rate


@click.command("balance")
@click.pass_context
def show_balance(ctx):
    """Show saved time, the interest rate and any interest just applied."""
    ledger = ctx.obj["ledger"]
    report = ctx.obj["load_report"]

    if report.created:
        click.echo("Started a new time bank.")
    if report.accrual is not None and not report.accrual.is_empty:
        accrual = report.accrual
        click.echo(
            f"Applied {format_minutes(accrual.total_interest)} of interest "
            f"for {accrual.days_passed} day{'s' if accrual.days_passed != 1 else ''} away."
        )

    click.echo(f"Saved time: {format_minutes(ledger.balance)} ({ledger.balance} min)")
    click.echo(f"Daily compound interest: {format_rate(ledger.interest_rate)}")
    click.echo(f"Last updated: {ledger.last_update_date}")


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(show_balance)
