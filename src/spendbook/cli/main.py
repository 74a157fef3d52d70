"""Main CLI entry point."""

import logging

import click

from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.errors import PersistenceError
from spendbook.storage.factories import create_storage, load_settings

# Import and register all commands at module level
from spendbook.cli.commands import (
    add,
    transaction,
    recurring,
    config,
    summary,
    report,
)


@click.group()
@click.option(
    "--storage-type",
    help="Storage backend: json, sqlite or postgres (overrides SPENDBOOK_STORAGE_TYPE)",
    envvar="SPENDBOOK_STORAGE_TYPE",
)
@click.option(
    "--storage-url",
    help="Data directory, SQLite file or host:port/db (overrides SPENDBOOK_STORAGE_URL)",
    envvar="SPENDBOOK_STORAGE_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Log storage activity to stderr")
@click.pass_context
def cli(ctx, storage_type: str | None, storage_url: str | None, verbose: bool):
    """Spendbook - Personal finance tracker.

    Record expenses and gains, generate recurring transactions and review
    monthly summaries, reports and trial-balance statements.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            storage = create_storage(load_settings(storage_type=storage_type, url=storage_url))
        except PersistenceError as e:
            handle_domain_error(ctx, e)
        ctx.obj["storage"] = storage
        ctx.call_on_close(storage.close)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
recurring.register_commands(cli)
config.register_commands(cli)
summary.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
