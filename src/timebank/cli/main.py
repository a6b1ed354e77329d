"""Main CLI entry point."""

import click
from timebank.database.factories import create_sqlite_database
from timebank.domain.ledger import LedgerService
from timebank.logging_config import setup_logging
from timebank.utils.date_parser import parse_date

# Import and register all commands at module level
from timebank.cli.commands import (
    balance,
    deposit,
    history,
    stats,
    settings,
    snapshot,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TIMEBANK_DB_PATH environment variable)",
    envvar="TIMEBANK_DB_PATH",
)
@click.option(
    "--today",
    help="Treat this date as today (YYYY-MM-DD or relative like 'yesterday')",
    envvar="TIMEBANK_TODAY",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
    envvar="TIMEBANK_LOG_LEVEL",
)
@click.option(
    "--max-accrual-days",
    type=click.IntRange(min=1),
    default=None,
    help="Most days of interest compounded at once after a long absence",
    envvar="TIMEBANK_MAX_ACCRUAL_DAYS",
)
@click.pass_context
def cli(ctx, db_path: str | None, today: str | None, log_level: str, max_accrual_days: int | None):
    """Timebank - Save time and watch it grow.

    Deposit and withdraw minutes; the balance earns daily compound interest
    that is applied automatically for every day since you last checked in.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Open the ledger only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    fixed_today = None
    if today:
        try:
            fixed_today = parse_date(today)
        except ValueError as e:
            click.echo(f"Error: Invalid --today date: {e}", err=True)
            ctx.exit(1)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()
    ctx.call_on_close(db.disconnect)

    ledger_kwargs = {}
    if max_accrual_days is not None:
        ledger_kwargs["max_accrual_days"] = max_accrual_days
    if fixed_today is not None:
        ledger_kwargs["clock"] = lambda: fixed_today
    ledger = LedgerService(db, **ledger_kwargs)

    report = ledger.open()
    if report.corrupt is not None:
        click.echo(f"Warning: {report.corrupt}. Starting with an empty ledger.", err=True)

    ctx.obj["db"] = db
    ctx.obj["ledger"] = ledger
    ctx.obj["load_report"] = report


# Register all commands
balance.register_commands(cli)
deposit.register_commands(cli)
history.register_commands(cli)
stats.register_commands(cli)
settings.register_commands(cli)
snapshot.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
