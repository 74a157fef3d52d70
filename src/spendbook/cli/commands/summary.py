"""Monthly summary command."""

import click

from spendbook.cli.date_filters import resolve_month
from spendbook.cli.display import signed_amount
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.errors import PersistenceError
from spendbook.domain.report import ReportService


def _display_category_totals(title: str, totals, grand_total: float, currency: str) -> None:
    """Print category totals with their share of the grand total, largest first."""
    click.echo(f"\n{title}:")
    if not totals:
        click.echo("  (none)")
        return
    for item in totals:
        share = item.amount / grand_total * 100 if grand_total else 0.0
        click.echo(
            f"  {item.category:<30} {signed_amount(item.amount, currency):>16} {share:>6.1f}%"
        )


@click.command("summary")
@click.option("--month", help="Expense month (YYYY-MM); defaults to the current one")
@click.pass_context
def summary(ctx, month: str | None):
    """Show totals for one expense month.

    The month starts on the configured start date, so with start date 25
    '2024-03' covers 25 March up to the end of 24 April.
    """
    storage = ctx.obj["storage"]
    service = ReportService(storage)

    try:
        year, month_num = resolve_month(ctx, service, month)
        result = service.monthly_summary(year, month_num)
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    totals = result.summary
    currency = result.currency
    click.echo(
        f"\nSummary for {year:04d}-{month_num:02d} "
        f"({result.start.strftime('%Y-%m-%d')} to {result.end.strftime('%Y-%m-%d')})"
    )
    click.echo("=" * 60)
    click.echo(f"  {'Gains':<30} {signed_amount(totals.total_gains, currency):>16}")
    click.echo(f"  {'Expenses':<30} {signed_amount(-totals.total_expenses, currency):>16}")
    click.echo(f"  {'Balance':<30} {signed_amount(totals.balance, currency):>16}")
    click.echo(f"  {'Transactions':<30} {totals.transaction_count:>16}")

    _display_category_totals("Expenses by category", totals.expenses_by_category, totals.total_expenses, currency)
    _display_category_totals("Gains by category", totals.gains_by_category, totals.total_gains, currency)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
