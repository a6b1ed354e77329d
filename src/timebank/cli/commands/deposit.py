"""Deposit and withdraw commands."""

import click
from timebank.cli.error_handling import handle_domain_error
from timebank.domain.entities import DEPOSIT_PRESETS
from timebank.domain.errors import DomainError
from timebank.utils.amount_parser import parse_minutes
from timebank.utils.date_parser import parse_date
from timebank.utils.time_format import format_minutes


def _parse_options(ctx, amount: str, date_str: str | None):
    """Parse amount and optional date arguments, exiting on bad input."""
    try:
        minutes = parse_minutes(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    txn_date = None
    if date_str:
        try:
            txn_date = parse_date(date_str, today=ctx.obj["ledger"].clock())
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)
    return minutes, txn_date


def _echo_transaction(verb: str, txn) -> None:
    click.echo(f"{verb} {format_minutes(txn.amount)} on {txn.date}")
    click.echo(f"  Balance: {format_minutes(txn.balance_after)}")


@click.command("deposit")
@click.argument("minutes", required=False)
@click.option(
    "--preset",
    type=click.Choice([str(p) for p in DEPOSIT_PRESETS]),
    help="Quick deposit of a preset number of minutes",
)
@click.option("--date", "date_str", help="Date to record (defaults to today)")
@click.pass_context
def deposit_time(ctx, minutes: str | None, preset: str | None, date_str: str | None):
    """Save time into the bank.

    Examples:
        timebank deposit 45
        timebank deposit 1h30m
        timebank deposit --preset 30
    """
    if (minutes is None) == (preset is None):
        click.echo("Error: Give either MINUTES or --preset, not both.", err=True)
        ctx.exit(1)

    amount, txn_date = _parse_options(ctx, minutes or preset, date_str)
    try:
        txn = ctx.obj["ledger"].deposit(amount, on=txn_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_transaction("Deposited", txn)


@click.command("withdraw")
@click.argument("minutes")
@click.option("--date", "date_str", help="Date to record (defaults to today)")
@click.pass_context
def withdraw_time(ctx, minutes: str, date_str: str | None):
    """Spend saved time.

    Examples:
        timebank withdraw 20
        timebank withdraw 1:15
    """
    amount, txn_date = _parse_options(ctx, minutes, date_str)
    try:
        txn = ctx.obj["ledger"].withdraw(amount, on=txn_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_transaction("Withdrew", txn)


def register_commands(cli):
    """Register deposit and withdraw commands with main CLI."""
    cli.add_command(deposit_time)
    cli.add_command(withdraw_time)
