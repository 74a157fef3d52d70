"""Recurring template commands."""

from dataclasses import replace

import click

from spendbook.cli.display import signed_amount
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.entities import Interval, RecurringTemplate
from spendbook.domain.errors import DomainError, PersistenceError
from spendbook.utils.amount_parser import parse_amount
from spendbook.utils.date_parser import parse_datetime

INTERVAL_CHOICES = [interval.value for interval in Interval]


def _count_instances(storage, template_id: str) -> int:
    return sum(1 for t in storage.get_all_transactions() if t.recurring_id == template_id)


@click.group()
def recurring_group():
    """Manage recurring transactions."""
    pass


@recurring_group.command("add")
@click.option("--description", required=True, help="Description of each generated transaction")
@click.option("--amount", required=True, help="Amount; negative for expenses, positive for gains")
@click.option("--category", required=True, help="Category name")
@click.option("--start", "start_date", required=True, help="Date of the first occurrence")
@click.option(
    "--interval",
    type=click.Choice(INTERVAL_CHOICES, case_sensitive=False),
    required=True,
    help="Repeat interval",
)
@click.option(
    "--occurrences",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Number of occurrences (0 repeats indefinitely)",
)
@click.option("--currency", help="Currency code (defaults to the configured currency)")
@click.option("--from", "from_party", default="", help="Payer")
@click.option("--to", "to_party", default="", help="Payee")
@click.option("--method", default="", help="Payment method")
@click.option("--note", default="", help="Free-form note")
@click.pass_context
def add_template(
    ctx,
    description: str,
    amount: str,
    category: str,
    start_date: str,
    interval: str,
    occurrences: int,
    currency: str | None,
    from_party: str,
    to_party: str,
    method: str,
    note: str,
):
    """Create a recurring template and generate its transactions.

    Examples:
        spendbook recurring add --description Rent --amount=-1200 --category Housing \\
            --start 2024-01-01 --interval monthly --occurrences 12
    """
    storage = ctx.obj["storage"]

    try:
        start = parse_datetime(start_date)
    except ValueError as e:
        click.echo(f"Error: Invalid start date: {e}", err=True)
        ctx.exit(1)

    try:
        template_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    template = RecurringTemplate(
        description=description,
        category=category,
        amount=template_amount,
        start_date=start,
        interval=interval.lower(),
        occurrences=occurrences,
        currency=(currency or "").lower(),
        from_party=from_party,
        to_party=to_party,
        method=method,
        note=note,
    )

    try:
        template_id = storage.add_recurring_template(template)
        generated = _count_instances(storage, template_id)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created recurring template {template_id}")
    click.echo(f"  Generated {generated} transaction(s)")


@recurring_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List recurring templates."""
    storage = ctx.obj["storage"]
    try:
        templates = storage.get_recurring_templates()
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    if not templates:
        click.echo("No recurring templates found.")
        return

    click.echo(f"\nFound {len(templates)} recurring template(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<38} {'Start':<12} {'Interval':<9} {'Count':>5} {'Amount':>16} {'Description':<25}"
    )
    click.echo("-" * 110)
    for template in templates:
        count = str(template.occurrences) if template.occurrences else "inf"
        click.echo(
            f"{template.id:<38} {template.start_date.strftime('%Y-%m-%d'):<12} "
            f"{template.interval:<9} {count:>5} "
            f"{signed_amount(template.amount, template.currency):>16} "
            f"{template.description[:25]:<25}"
        )


@recurring_group.command("update")
@click.argument("template_id")
@click.option("--description", help="Description")
@click.option("--amount", help="Amount; negative for expenses, positive for gains")
@click.option("--category", help="Category name")
@click.option("--start", "start_date", help="Date of the first occurrence")
@click.option(
    "--interval",
    type=click.Choice(INTERVAL_CHOICES, case_sensitive=False),
    help="Repeat interval",
)
@click.option("--occurrences", type=click.IntRange(min=0), help="Number of occurrences (0 repeats indefinitely)")
@click.option("--currency", help="Currency code")
@click.option("--from", "from_party", help="Payer")
@click.option("--to", "to_party", help="Payee")
@click.option("--method", help="Payment method")
@click.option("--note", help="Free-form note")
@click.option(
    "--all",
    "update_all",
    is_flag=True,
    help="Regenerate every instance; by default past instances are kept",
)
@click.pass_context
def update_template(
    ctx,
    template_id: str,
    description: str | None,
    amount: str | None,
    category: str | None,
    start_date: str | None,
    interval: str | None,
    occurrences: int | None,
    currency: str | None,
    from_party: str | None,
    to_party: str | None,
    method: str | None,
    note: str | None,
    update_all: bool,
):
    """Update a recurring template and regenerate its transactions.

    Without --all only instances dated after now are replaced.
    """
    storage = ctx.obj["storage"]

    changes = {}
    for name, value in (
        ("description", description),
        ("category", category),
        ("from_party", from_party),
        ("to_party", to_party),
        ("method", method),
        ("note", note),
        ("occurrences", occurrences),
    ):
        if value is not None:
            changes[name] = value
    if interval is not None:
        changes["interval"] = interval.lower()
    if currency is not None:
        changes["currency"] = currency.lower()

    if start_date is not None:
        try:
            changes["start_date"] = parse_datetime(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if amount is not None:
        try:
            changes["amount"] = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        existing = storage.get_recurring_template(template_id)
        storage.update_recurring_template(template_id, replace(existing, **changes), update_all)
        generated = _count_instances(storage, template_id)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)

    scope = "all" if update_all else "future"
    click.echo(f"Updated recurring template {template_id} ({scope} instances)")
    click.echo(f"  Template now has {generated} transaction(s)")


@recurring_group.command("remove")
@click.argument("template_id")
@click.option(
    "--all",
    "remove_all",
    is_flag=True,
    help="Also remove past instances; by default only future ones go",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_template(ctx, template_id: str, remove_all: bool, yes: bool):
    """Remove a recurring template and its generated transactions."""
    storage = ctx.obj["storage"]

    if not yes and not click.confirm(f"Are you sure you want to remove template {template_id}?"):
        click.echo("Removal cancelled.")
        return

    try:
        storage.remove_recurring_template(template_id, remove_all)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed recurring template {template_id}")


def register_commands(cli: click.Group) -> None:
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group, name="recurring")
