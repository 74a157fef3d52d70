"""CLI error handling helpers."""

import logging

import click

from spendbook.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | PersistenceError | ValueError) -> None:
    """Render an error as one line on stderr and exit with failure.

    Storage failures name the operation that failed and log the traceback
    at debug level.
    """
    if isinstance(error, PersistenceError):
        logger.debug("Storage operation %s failed", error.operation, exc_info=error)
        click.echo(f"Error: storage failure during {error}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
