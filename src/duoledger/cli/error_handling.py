"""CLI error handling helpers."""

import click
import structlog

from duoledger.domain.errors import DomainError

logger = structlog.get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error as ``Error: <message>`` and exit with status 1."""
    logger.debug("command_failed", command=ctx.command_path, error_type=type(error).__name__)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
