"""Shared CLI rendering helpers."""

from typing import Sequence

import click

from spendbook.domain.currency import format_amount
from spendbook.domain.entities import Transaction


def signed_amount(amount: float, currency: str) -> str:
    """Format an amount with a leading minus sign for outflows."""
    text = format_amount(amount, currency)
    return f"-{text}" if amount < 0 else text


def print_transaction_table(transactions: Sequence[Transaction]) -> None:
    """Print a compact transaction table."""
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<10} {'Date':<12} {'Amount':>16} {'Category':<20} {'Description':<40}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        date_str = txn.date.strftime("%Y-%m-%d") if txn.date else ""
        amount_str = signed_amount(txn.amount, txn.currency)
        marker = "*" if txn.recurring_id else ""
        click.echo(
            f"{txn.id:<10} {date_str:<12} {amount_str:>16} {txn.category[:20]:<20} "
            f"{(txn.description + marker)[:40]:<40}"
        )


def print_transaction_details(txn: Transaction) -> None:
    """Print every field of a transaction."""
    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date.isoformat() if txn.date else ''}")
    click.echo(f"  Amount: {signed_amount(txn.amount, txn.currency)} ({txn.currency})")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Description: {txn.description}")
    if txn.from_party:
        click.echo(f"  From: {txn.from_party}")
    if txn.to_party:
        click.echo(f"  To: {txn.to_party}")
    if txn.method:
        click.echo(f"  Method: {txn.method}")
    if txn.note:
        click.echo(f"  Note: {txn.note}")
    if txn.recurring_id:
        click.echo(f"  Recurring template: {txn.recurring_id}")
