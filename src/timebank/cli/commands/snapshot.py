"""Snapshot export and import commands."""

from pathlib import Path

import click
from timebank.cli.error_handling import handle_domain_error
from timebank.database.mappers import snapshot_from_payload, snapshot_to_payload
from timebank.domain.errors import DomainError
from timebank.utils.time_format import format_minutes


@click.command("export")
@click.argument("output_file", type=click.Path(dir_okay=False, writable=True), required=False)
@click.pass_context
def export_snapshot(ctx, output_file: str | None):
    """Write the ledger as JSON to OUTPUT_FILE (or stdout)."""
    payload = snapshot_to_payload(ctx.obj["ledger"].snapshot)
    if output_file is None:
        click.echo(payload)
        return
    Path(output_file).write_text(payload, encoding="utf-8")
    click.echo(f"Exported ledger to {output_file}")


@click.command("import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_snapshot(ctx, input_file: str, yes: bool):
    """Replace the ledger with a JSON export.

    Exports from older versions of the app are accepted. Interest owed since
    the export's last update is applied straight away.
    """
    ledger = ctx.obj["ledger"]
    try:
        imported = snapshot_from_payload(
            Path(input_file).read_text(encoding="utf-8"), ledger.clock()
        )
    except (ValueError, OSError) as e:
        click.echo(f"Error: Could not import {input_file}: {e}", err=True)
        ctx.exit(1)

    if not yes:
        click.confirm(
            "Replace all current data with the imported ledger? This cannot be undone",
            abort=True,
        )

    try:
        ledger.replace_snapshot(imported)
        result = ledger.reconcile()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Imported {len(imported.transactions)} transaction(s)")
    if not result.is_empty:
        click.echo(f"  Applied interest: {format_minutes(result.total_interest)}")
    click.echo(f"  Saved time: {format_minutes(ledger.balance)}")


def register_commands(cli):
    """Register snapshot commands with main CLI."""
    cli.add_command(export_snapshot)
    cli.add_command(import_snapshot)
