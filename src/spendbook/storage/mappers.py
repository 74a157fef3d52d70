"""Mapper functions between domain entities and their stored forms.

ORM rows are used by the relational store, plain dicts by the JSON file
store. Timestamps are stored in UTC; naive values read back are taken as UTC.
"""

import json
from datetime import datetime, UTC
from typing import Any, Optional

from dateutil import parser as date_parser

from spendbook.domain import entities as domain
from spendbook.storage.models import ConfigRow, RecurringTemplateRow, TransactionRow
from spendbook.utils.date_parser import as_utc


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC."""
    if value is None:
        return None
    return as_utc(value).astimezone(UTC)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return to_utc(date_parser.isoparse(value))


# ORM rows
def transaction_to_domain(row: TransactionRow) -> domain.Transaction:
    """Convert a TransactionRow to a domain Transaction."""
    return domain.Transaction(
        id=row.id,
        recurring_id=row.recurring_id or None,
        description=row.description,
        from_party=row.from_party or "",
        to_party=row.to_party or "",
        method=row.method or "",
        note=row.note or "",
        category=row.category,
        amount=float(row.amount),
        currency=row.currency,
        date=to_utc(row.date),
    )


def transaction_to_row_values(txn: domain.Transaction) -> dict[str, Any]:
    """Column values for inserting or updating a TransactionRow."""
    return {
        "id": txn.id,
        "recurring_id": txn.recurring_id or None,
        "description": txn.description,
        "from_party": txn.from_party,
        "to_party": txn.to_party,
        "method": txn.method,
        "note": txn.note,
        "category": txn.category,
        "amount": txn.amount,
        "currency": txn.currency,
        "date": to_utc(txn.date),
    }


def template_to_domain(row: RecurringTemplateRow) -> domain.RecurringTemplate:
    """Convert a RecurringTemplateRow to a domain RecurringTemplate."""
    return domain.RecurringTemplate(
        id=row.id,
        description=row.description,
        amount=float(row.amount),
        currency=row.currency,
        from_party=row.from_party or "",
        to_party=row.to_party or "",
        method=row.method or "",
        note=row.note or "",
        category=row.category,
        start_date=to_utc(row.start_date),
        interval=row.interval,
        occurrences=row.occurrences,
    )


def template_to_row_values(template: domain.RecurringTemplate) -> dict[str, Any]:
    """Column values for inserting or updating a RecurringTemplateRow."""
    return {
        "id": template.id,
        "description": template.description,
        "amount": template.amount,
        "currency": template.currency,
        "from_party": template.from_party,
        "to_party": template.to_party,
        "method": template.method,
        "note": template.note,
        "category": template.category,
        "start_date": to_utc(template.start_date),
        "interval": template.interval,
        "occurrences": template.occurrences,
    }


def config_to_domain(row: ConfigRow) -> domain.Config:
    """Convert the ConfigRow to a domain Config, decoding its JSON columns."""
    return domain.Config(
        categories=tuple(json.loads(row.categories)),
        currency=row.currency,
        start_date=row.start_date,
        language=row.language or domain.DEFAULT_LANGUAGE,
        voucher_counter=row.voucher_counter or 0,
        receipt_counter=row.receipt_counter or 0,
        opening_balance=float(row.opening_balance or 0),
        use_manual_balances=bool(row.use_manual_balances),
        manual_balances={k: float(v) for k, v in json.loads(row.manual_balances or "{}").items()},
    )


def config_to_row_values(config: domain.Config) -> dict[str, Any]:
    """Column values for the ConfigRow, JSON-encoding list and map fields."""
    return {
        "categories": json.dumps(list(config.categories)),
        "currency": config.currency,
        "start_date": config.start_date,
        "language": config.language,
        "voucher_counter": config.voucher_counter,
        "receipt_counter": config.receipt_counter,
        "opening_balance": config.opening_balance,
        "use_manual_balances": config.use_manual_balances,
        "manual_balances": json.dumps(config.manual_balances),
    }


# JSON documents
def transaction_to_dict(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a Transaction to its JSON document form."""
    return {
        "id": txn.id,
        "recurringId": txn.recurring_id or "",
        "description": txn.description,
        "from": txn.from_party,
        "to": txn.to_party,
        "method": txn.method,
        "note": txn.note,
        "category": txn.category,
        "amount": txn.amount,
        "currency": txn.currency,
        "date": to_utc(txn.date).isoformat() if txn.date else None,
    }


def transaction_from_dict(data: dict[str, Any]) -> domain.Transaction:
    """Build a Transaction from its JSON document form."""
    return domain.Transaction(
        id=data.get("id", ""),
        recurring_id=data.get("recurringId") or None,
        description=data.get("description", ""),
        from_party=data.get("from", ""),
        to_party=data.get("to", ""),
        method=data.get("method", ""),
        note=data.get("note", ""),
        category=data.get("category", ""),
        amount=float(data.get("amount", 0)),
        currency=data.get("currency", ""),
        date=_parse_timestamp(data.get("date")),
    )


def template_to_dict(template: domain.RecurringTemplate) -> dict[str, Any]:
    """Convert a RecurringTemplate to its JSON document form."""
    return {
        "id": template.id,
        "description": template.description,
        "amount": template.amount,
        "currency": template.currency,
        "from": template.from_party,
        "to": template.to_party,
        "method": template.method,
        "note": template.note,
        "category": template.category,
        "startDate": to_utc(template.start_date).isoformat() if template.start_date else None,
        "interval": template.interval,
        "occurrences": template.occurrences,
    }


def template_from_dict(data: dict[str, Any]) -> domain.RecurringTemplate:
    """Build a RecurringTemplate from its JSON document form."""
    return domain.RecurringTemplate(
        id=data.get("id", ""),
        description=data.get("description", ""),
        amount=float(data.get("amount", 0)),
        currency=data.get("currency", ""),
        from_party=data.get("from", ""),
        to_party=data.get("to", ""),
        method=data.get("method", ""),
        note=data.get("note", ""),
        category=data.get("category", ""),
        start_date=_parse_timestamp(data.get("startDate")),
        interval=data.get("interval", ""),
        occurrences=int(data.get("occurrences", 0)),
    )


def config_to_dict(
    config: domain.Config, templates: list[domain.RecurringTemplate]
) -> dict[str, Any]:
    """Convert the Config and recurring templates to the config document."""
    return {
        "categories": list(config.categories),
        "currency": config.currency,
        "startDate": config.start_date,
        "language": config.language,
        "voucherCounter": config.voucher_counter,
        "receiptCounter": config.receipt_counter,
        "openingBalance": config.opening_balance,
        "useManualBalances": config.use_manual_balances,
        "manualBalances": dict(config.manual_balances),
        "recurringTransactions": [template_to_dict(t) for t in templates],
    }


def config_from_dict(
    data: dict[str, Any], defaults: domain.Config
) -> tuple[domain.Config, list[domain.RecurringTemplate]]:
    """Build the Config and recurring templates from the config document.

    Missing keys fall back to ``defaults``.
    """
    config = domain.Config(
        categories=tuple(data.get("categories") or defaults.categories),
        currency=data.get("currency") or defaults.currency,
        start_date=int(data.get("startDate") or defaults.start_date),
        language=data.get("language") or defaults.language,
        voucher_counter=int(data.get("voucherCounter", 0)),
        receipt_counter=int(data.get("receiptCounter", 0)),
        opening_balance=float(data.get("openingBalance", 0)),
        use_manual_balances=bool(data.get("useManualBalances", False)),
        manual_balances={
            k: float(v) for k, v in (data.get("manualBalances") or {}).items()
        },
    )
    templates = [template_from_dict(item) for item in data.get("recurringTransactions") or []]
    return config, templates
