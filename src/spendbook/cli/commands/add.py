"""Add transaction command."""

import click

from spendbook.cli.display import signed_amount
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.entities import Transaction
from spendbook.domain.errors import DomainError, PersistenceError
from spendbook.utils.amount_parser import parse_amount
from spendbook.utils.date_parser import parse_datetime


@click.command("add")
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--amount",
    required=True,
    help="Amount; negative for expenses, positive for gains (e.g., -12.50 or 1000)",
)
@click.option("--category", required=True, help="Category name (e.g., 'Food')")
@click.option(
    "--date",
    help="Transaction date (YYYY-MM-DD, ISO timestamp or 'today', 'yesterday'); defaults to now",
)
@click.option("--currency", help="Currency code (defaults to the configured currency)")
@click.option("--from", "from_party", default="", help="Payer")
@click.option("--to", "to_party", default="", help="Payee")
@click.option("--method", default="", help="Payment method")
@click.option("--note", default="", help="Free-form note")
@click.option("--id", "transaction_id", default="", help="Explicit ID (a BAU-/RES- ID is assigned if omitted)")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    category: str,
    date: str | None,
    currency: str | None,
    from_party: str,
    to_party: str,
    method: str,
    note: str,
    transaction_id: str,
):
    """Add a transaction manually.

    Examples:
        spendbook add --description "Groceries" --amount=-42.10 --category Food
        spendbook add --description "Salary" --amount 3000 --category Income --date 2024-03-25
    """
    storage = ctx.obj["storage"]

    # Parse date
    txn_date = None
    if date:
        try:
            txn_date = parse_datetime(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    txn = Transaction(
        id=transaction_id,
        description=description,
        category=category,
        amount=txn_amount,
        date=txn_date,
        currency=(currency or "").lower(),
        from_party=from_party,
        to_party=to_party,
        method=method,
        note=note,
    )

    try:
        new_id = storage.add_transaction(txn)
        stored = storage.get_transaction(new_id)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {new_id}")
    click.echo(f"  Date: {stored.date.strftime('%Y-%m-%d')}")
    click.echo(f"  Amount: {signed_amount(stored.amount, stored.currency)}")
    click.echo(f"  Category: {stored.category}")
    click.echo(f"  Description: {stored.description}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
