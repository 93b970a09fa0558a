"""CLI error handling helpers."""

import logging

import click

from tradejournal.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | OSError) -> None:
    """Print 'Error: <message>' on stderr and exit with status 1."""
    logger.debug("%s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
