"""Report and statement commands."""

import click

from spendbook.cli.date_filters import resolve_date_range, resolve_month
from spendbook.cli.display import signed_amount
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.errors import PersistenceError
from spendbook.domain.report import ReportService
from spendbook.domain.reporting import ReportPeriod, TransactionKind


@click.command("report")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in TransactionKind], case_sensitive=False),
    default=TransactionKind.EXPENSES.value,
    show_default=True,
    help="Report on expenses or gains",
)
@click.option(
    "--period",
    type=click.Choice([p.value for p in ReportPeriod], case_sensitive=False),
    default=ReportPeriod.MONTHLY.value,
    show_default=True,
    help="Group transactions by day, month or year",
)
@click.option("--month", help="Limit to one expense month (YYYY-MM)")
@click.option("--category", help="Limit to one category")
@click.pass_context
def report(ctx, kind: str, period: str, month: str | None, category: str | None):
    """List expenses or gains grouped by period."""
    storage = ctx.obj["storage"]
    service = ReportService(storage)

    year = month_num = None
    if month:
        year, month_num = resolve_month(ctx, service, month)

    try:
        result = service.report(
            TransactionKind(kind.lower()),
            ReportPeriod(period.lower()),
            year=year,
            month=month_num,
            category=category,
        )
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    if not result.groups:
        click.echo(f"No {result.kind.value} found.")
        return

    title = result.kind.value.capitalize()
    if category:
        title += f" in {category}"
    click.echo(f"\n{title} ({result.period.value})")
    click.echo("=" * 80)
    for key, transactions in result.groups.items():
        subtotal = sum(abs(t.amount) for t in transactions)
        click.echo(f"\n{key:<50} {signed_amount(subtotal, result.currency):>20}")
        for txn in transactions:
            click.echo(
                f"  {txn.date.strftime('%Y-%m-%d'):<12} {txn.id:<10} "
                f"{txn.description[:26]:<26} {signed_amount(abs(txn.amount), txn.currency):>20}"
            )
    click.echo("-" * 80)
    click.echo(f"{'TOTAL':<50} {signed_amount(result.total, result.currency):>20}")


@click.command("statement")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--month", help="Expense month (YYYY-MM) instead of a date range")
@click.pass_context
def statement(ctx, start_date: str | None, end_date: str | None, month: str | None):
    """Show a trial-balance statement.

    Expenses are listed as debits and gains as credits. The opening balance
    sits on the credit side and the closing balance on the debit side, so
    both columns add up to the same total.
    """
    storage = ctx.obj["storage"]
    service = ReportService(storage)

    if month and (start_date or end_date):
        click.echo("Error: --month cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    if month:
        start, end = service.month_window(*resolve_month(ctx, service, month))
    else:
        start, end = resolve_date_range(ctx, start_date, end_date)

    try:
        balance = service.trial_balance(start=start, end=end)
        currency = storage.get_currency()
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    def row(label: str, debit: float | None, credit: float | None) -> None:
        debit_str = signed_amount(debit, currency) if debit is not None else ""
        credit_str = signed_amount(credit, currency) if credit is not None else ""
        click.echo(f"{label:<36} {debit_str:>20} {credit_str:>20}")

    period = "all time"
    if start or end:
        period = (
            f"{start.strftime('%Y-%m-%d') if start else '...'} to "
            f"{end.strftime('%Y-%m-%d') if end else '...'}"
        )
    click.echo(f"\nTrial balance ({period})")
    click.echo("=" * 78)
    click.echo(f"{'Account':<36} {'Debit':>20} {'Credit':>20}")
    click.echo("-" * 78)
    row("Opening balance", None, balance.opening_balance)
    for item in balance.credits:
        label = item.category + (" (manual)" if item.category in balance.manual_categories else "")
        row(label, None, item.amount)
    for item in balance.debits:
        label = item.category + (" (manual)" if item.category in balance.manual_categories else "")
        row(label, item.amount, None)
    row("Closing balance", balance.closing_balance, None)
    click.echo("-" * 78)
    row("TOTAL", balance.total_debits, balance.total_credits)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report)
    cli.add_command(statement)
