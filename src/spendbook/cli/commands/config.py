"""Configuration commands."""

import click

from spendbook.cli.display import signed_amount
from spendbook.cli.error_handling import handle_domain_error
from spendbook.domain.currency import SUPPORTED_CURRENCIES
from spendbook.domain.entities import SUPPORTED_LANGUAGES
from spendbook.domain.errors import DomainError, PersistenceError
from spendbook.utils.amount_parser import parse_amount


@click.group()
def config_group():
    """View and change settings."""
    pass


@config_group.command("show")
@click.pass_context
def show_config(ctx):
    """Show the current configuration."""
    storage = ctx.obj["storage"]
    try:
        config = storage.get_config()
    except PersistenceError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Currency: {config.currency}")
    click.echo(f"Start date: {config.start_date}")
    click.echo(f"Language: {config.language}")
    click.echo(f"Opening balance: {signed_amount(config.opening_balance, config.currency)}")
    click.echo(f"Manual balances: {'on' if config.use_manual_balances else 'off'}")
    click.echo(f"Next expense ID counter: {config.voucher_counter + 1}")
    click.echo(f"Next gain ID counter: {config.receipt_counter + 1}")
    click.echo("Categories:")
    for name in config.categories:
        click.echo(f"  {name}")


@config_group.command("currency")
@click.argument("code", required=False)
@click.pass_context
def currency(ctx, code: str | None):
    """Show or set the default currency (e.g., usd, eur, myr)."""
    storage = ctx.obj["storage"]
    try:
        if code is None:
            click.echo(storage.get_currency())
            return
        storage.update_currency(code.lower())
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Currency set to {code.lower()}")


@config_group.command("currencies")
def list_currencies():
    """List supported currency codes."""
    click.echo(" ".join(sorted(SUPPORTED_CURRENCIES)))


@config_group.command("start-date")
@click.argument("day", type=int, required=False)
@click.pass_context
def start_date(ctx, day: int | None):
    """Show or set the first day of the expense month (1-31)."""
    storage = ctx.obj["storage"]
    try:
        if day is None:
            click.echo(storage.get_start_date())
            return
        storage.update_start_date(day)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Start date set to {day}")


@config_group.command("language")
@click.argument("code", required=False)
@click.pass_context
def language(ctx, code: str | None):
    """Show or set the display language."""
    storage = ctx.obj["storage"]
    try:
        if code is None:
            click.echo(storage.get_language())
            return
        storage.update_language(code.lower())
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Language set to {code.lower()} (supported: {', '.join(sorted(SUPPORTED_LANGUAGES))})")


@config_group.command("categories")
@click.argument("names", nargs=-1)
@click.option("--add", "added", multiple=True, help="Append a category (repeatable)")
@click.option("--remove", "removed", multiple=True, help="Drop a category (repeatable)")
@click.pass_context
def categories(ctx, names: tuple[str, ...], added: tuple[str, ...], removed: tuple[str, ...]):
    """List categories, replace them with NAMES, or add/remove some.

    Examples:
        spendbook config categories
        spendbook config categories Food Rent Income
        spendbook config categories --add Pets --remove Education
    """
    storage = ctx.obj["storage"]
    try:
        if not (names or added or removed):
            for name in storage.get_categories():
                click.echo(name)
            return

        current = list(names) if names else storage.get_categories()
        current = [name for name in current if name not in removed] + list(added)
        storage.update_categories(current)
        updated = storage.get_categories()
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Categories updated ({len(updated)}): {', '.join(updated)}")


@config_group.command("opening-balance")
@click.argument("amount", required=False)
@click.pass_context
def opening_balance(ctx, amount: str | None):
    """Show or set the opening balance used by statements."""
    storage = ctx.obj["storage"]

    balance = None
    if amount is not None:
        try:
            balance = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        if balance is None:
            click.echo(signed_amount(storage.get_opening_balance(), storage.get_currency()))
            return
        storage.update_opening_balance(balance)
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Opening balance set to {signed_amount(balance, storage.get_currency())}")


@config_group.command("manual-balances")
@click.option("--enable/--disable", "enabled", default=None, help="Turn manual balances on or off")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    help="CATEGORY=AMOUNT override; positive amounts are credits, negative debits (repeatable)",
)
@click.option("--clear", is_flag=True, help="Remove all manual balances")
@click.pass_context
def manual_balances(ctx, enabled: bool | None, assignments: tuple[str, ...], clear: bool):
    """Show or change manual category balances for statements.

    Examples:
        spendbook config manual-balances --enable --set Rent=-1200 --set Income=5000
        spendbook config manual-balances --disable
    """
    storage = ctx.obj["storage"]

    overrides = {}
    for assignment in assignments:
        name, sep, value = assignment.rpartition("=")
        if not sep or not name:
            click.echo(f"Error: Expected CATEGORY=AMOUNT, got '{assignment}'", err=True)
            ctx.exit(1)
        try:
            overrides[name] = parse_amount(value)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        if clear or overrides:
            balances = {} if clear else storage.get_manual_balances()
            balances.update(overrides)
            storage.update_manual_balances(balances)
        if enabled is not None:
            storage.update_use_manual_balances(enabled)
        config = storage.get_config()
    except (DomainError, PersistenceError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Manual balances: {'on' if config.use_manual_balances else 'off'}")
    for name, value in sorted(config.manual_balances.items()):
        click.echo(f"  {name}: {signed_amount(value, config.currency)}")


def register_commands(cli: click.Group) -> None:
    """Register config commands with main CLI."""
    cli.add_command(config_group, name="config")
