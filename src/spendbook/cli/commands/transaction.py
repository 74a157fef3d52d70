"""Transaction management commands."""

from dataclasses import replace

import click

from spendbook.cli.date_filters import resolve_date_range, resolve_month
from spendbook.cli.display import (
    print_transaction_details,
    print_transaction_table,
    signed_amount,
)
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.errors import DomainError, PersistenceError
from spendbook.domain.report import ReportService
from spendbook.domain.reporting import TransactionKind, filter_transactions
from spendbook.utils.amount_parser import parse_amount
from spendbook.utils.date_parser import parse_datetime


@click.command("list")
@click.option("--month", help="Expense month (YYYY-MM), honouring the configured start date")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in TransactionKind], case_sensitive=False),
    help="Only expenses or only gains",
)
@click.option("--category", help="Category name")
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.pass_context
def list_transactions(
    ctx,
    month: str | None,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    category: str | None,
    limit: int | None,
):
    """List transactions, newest first.

    Transactions generated from a recurring template are marked with '*'.
    """
    storage = ctx.obj["storage"]

    if month and (start_date or end_date):
        click.echo("Error: --month cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    window = None
    if month:
        service = ReportService(storage)
        year, month_num = resolve_month(ctx, service, month)
        window = service.month_window(year, month_num)
    elif start_date or end_date:
        window = resolve_date_range(ctx, start_date, end_date)

    try:
        transactions = filter_transactions(
            storage.get_all_transactions(),
            kind=TransactionKind(kind.lower()) if kind else None,
            window=window,
            category=category,
        )
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    shown = transactions[:limit] if limit else transactions
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    print_transaction_table(shown)

    currency = storage.get_currency()
    total_expenses = sum(t.amount for t in transactions if t.amount < 0)
    total_gains = sum(t.amount for t in transactions if t.amount > 0)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<10} Expenses: {signed_amount(total_expenses, currency)} | "
        f"Gains: {signed_amount(total_gains, currency)} | Count: {len(transactions)}"
    )


@click.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str):
    """Show every field of one transaction."""
    storage = ctx.obj["storage"]
    try:
        txn = storage.get_transaction(transaction_id)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    print_transaction_details(txn)


@click.command("edit")
@click.argument("transaction_id")
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Amount; negative for expenses, positive for gains")
@click.option("--category", help="Category name")
@click.option("--date", help="Transaction date (YYYY-MM-DD, ISO timestamp or relative)")
@click.option("--currency", help="Currency code")
@click.option("--from", "from_party", help="Payer")
@click.option("--to", "to_party", help="Payee")
@click.option("--method", help="Payment method")
@click.option("--note", help="Free-form note")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: str,
    description: str | None,
    amount: str | None,
    category: str | None,
    date: str | None,
    currency: str | None,
    from_party: str | None,
    to_party: str | None,
    method: str | None,
    note: str | None,
):
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        spendbook edit BAU-0001 --amount=-75.00
        spendbook edit RES-0002 --category Income --note "March payslip"
    """
    storage = ctx.obj["storage"]

    changes = {}
    if description is not None:
        changes["description"] = description
    if category is not None:
        changes["category"] = category
    if currency is not None:
        changes["currency"] = currency.lower()
    if from_party is not None:
        changes["from_party"] = from_party
    if to_party is not None:
        changes["to_party"] = to_party
    if method is not None:
        changes["method"] = method
    if note is not None:
        changes["note"] = note

    if date is not None:
        try:
            changes["date"] = parse_datetime(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        existing = storage.get_transaction(transaction_id)
        storage.update_transaction(transaction_id, replace(existing, **changes))
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@click.command("remove")
@click.argument("transaction_ids", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_transactions(ctx, transaction_ids: tuple[str, ...], yes: bool):
    """Remove one or more transactions.

    A single unknown ID is an error; with several IDs unknown ones are skipped.

    Examples:
        spendbook remove BAU-0001
        spendbook remove BAU-0001 BAU-0002 --yes
    """
    storage = ctx.obj["storage"]
    ids = ", ".join(transaction_ids)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to remove {ids}?"):
        click.echo("Removal cancelled.")
        return

    try:
        if len(transaction_ids) == 1:
            storage.remove_transaction(transaction_ids[0])
        else:
            storage.remove_transactions(transaction_ids)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed {ids}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions)
    cli.add_command(show_transaction)
    cli.add_command(edit_transaction)
    cli.add_command(remove_transactions)
