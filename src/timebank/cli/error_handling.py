"""CLI error handling helpers."""

import click

from timebank.domain.errors import DomainError, InsufficientBalanceError
from timebank.utils.time_format import format_minutes


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, InsufficientBalanceError):
        click.echo(
            f"Error: Not enough saved time. Requested {format_minutes(error.requested)}, "
            f"available {format_minutes(error.available)}.",
            err=True,
        )
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
