"""Transaction history command."""

import click
from timebank.cli.date_filters import date_filter_options, period_flags_from, resolve_cli_date_range
from timebank.domain.entities import TransactionFilter, TransactionKind
from timebank.utils.time_format import format_minutes

KIND_CHOICES = [kind.value for kind in TransactionKind]


def build_filter(ctx, kind: str | None, start_date, end_date, period_flags) -> TransactionFilter:
    """Build a TransactionFilter from shared CLI options."""
    ledger = ctx.obj["ledger"]
    date_range = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        today=ledger.clock(),
    )
    return TransactionFilter(
        kind=TransactionKind(kind) if kind else None,
        date_range=date_range,
    )


@click.command("history")
@click.option("--kind", type=click.Choice(KIND_CHOICES, case_sensitive=False), help="Only this kind of transaction")
@click.option("--limit", type=click.IntRange(min=1), help="Show at most this many transactions")
@date_filter_options
@click.pass_context
def view_history(
    ctx,
    kind: str | None,
    limit: int | None,
    start_date: str | None,
    end_date: str | None,
    last_7_days: bool,
    last_30_days: bool,
    this_week: bool,
    last_week: bool,
    this_month: bool,
    last_month: bool,
):
    """View transactions, newest first."""
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

    transactions = list(ledger.query(transaction_filter))
    if not transactions:
        click.echo("No transactions found.")
        return

    shown = transactions[:limit] if limit else transactions
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 60)
    click.echo(f"{'ID':<8} {'Date':<12} {'Kind':<12} {'Amount':>10} {'Balance':>14}")
    click.echo("-" * 60)

    for txn in shown:
        sign = "+" if txn.kind.is_credit else "-"
        amount_str = f"{sign}{format_minutes(txn.amount)}"
        click.echo(
            f"{txn.id:<8} {str(txn.date):<12} {txn.kind.label:<12} {amount_str:>10} "
            f"{format_minutes(txn.balance_after):>14}"
        )


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(view_history)
