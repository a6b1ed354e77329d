"""Interest rate, projection and reset commands."""

import click
from timebank.cli.error_handling import handle_domain_error
from timebank.domain.errors import DomainError
from timebank.utils.amount_parser import parse_rate
from timebank.utils.time_format import format_minutes, format_rate


@click.command("rate")
@click.argument("new_rate", required=False)
@click.pass_context
def interest_rate(ctx, new_rate: str | None):
    """Show or change the daily compound interest rate (percent per day).

    Changing the rate only affects interest from now on.

    Examples:
        timebank rate
        timebank rate 2.5
    """
    ledger = ctx.obj["ledger"]
    if new_rate is None:
        click.echo(f"Daily compound interest: {format_rate(ledger.interest_rate)}")
        return

    try:
        ledger.set_interest_rate(parse_rate(new_rate))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Daily compound interest set to {format_rate(ledger.interest_rate)}")


@click.command("project")
@click.argument("days", type=click.IntRange(min=0))
@click.pass_context
def project_balance(ctx, days: int):
    """Preview the balance after DAYS days of interest with no other activity."""
    ledger = ctx.obj["ledger"]
    try:
        projected = ledger.project(days)
    except DomainError as e:
        handle_domain_error(ctx, e)
    gain = projected - ledger.balance
    click.echo(f"Projected saved time after {days} day{'s' if days != 1 else ''}: {format_minutes(projected)}")
    click.echo(f"  Interest earned: {format_minutes(gain)}")


@click.command("reset")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_ledger(ctx, yes: bool):
    """Delete all saved time and history. This cannot be undone."""
    if not yes:
        click.confirm(
            "Really delete all saved time and history? This cannot be undone",
            abort=True,
        )
    ctx.obj["ledger"].reset()
    click.echo("All data has been reset.")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(interest_rate)
    cli.add_command(project_balance)
    cli.add_command(reset_ledger)
