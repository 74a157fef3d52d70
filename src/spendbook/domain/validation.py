"""Sanitization and validation of user-supplied transaction data."""

import re
import unicodedata
from dataclasses import replace
from typing import Iterable, Mapping

from spendbook.domain import errors
from spendbook.domain.entities import (
    SUPPORTED_CURRENCIES,
    SUPPORTED_LANGUAGES,
    Interval,
    RecurringTemplate,
    Transaction,
)
from spendbook.domain.errors import ValidationError

# Unbounded templates materialize at most this many instances.
MAX_GENERATED_OCCURRENCES = 2000

_ALLOWED_PUNCTUATION = frozenset(".,-'_!\"&")
_ALLOWED_WHITESPACE = frozenset(" \t\n\f\r")
_REPEATING_SPACES = re.compile(r"\s+")


def _is_allowed(char: str) -> bool:
    if char in _ALLOWED_PUNCTUATION or char in _ALLOWED_WHITESPACE:
        return True
    # Unicode letters (L*) and numbers (N*)
    return unicodedata.category(char)[0] in ("L", "N")


def sanitize(text: str | None) -> str:
    """Replace disallowed characters with spaces and normalize whitespace.

    Letters and numbers from any script are kept, as are whitespace and the
    punctuation ``. , - ' _ ! " &``. Everything else becomes a space, runs of
    whitespace collapse to one space, and the result is trimmed.

    Args:
        text: Free text, or None

    Returns:
        Cleaned text (empty string for None)
    """
    if not text:
        return ""
    cleaned = "".join(char if _is_allowed(char) else " " for char in text)
    return _REPEATING_SPACES.sub(" ", cleaned).strip()


def validate_category(name: str) -> str:
    """Sanitize a category name, rejecting names that end up empty."""
    sanitized = sanitize(name)
    if not sanitized:
        raise ValidationError(
            "Category name cannot be empty or contain only invalid characters"
        )
    return sanitized


def validate_categories(names: Iterable[str]) -> tuple[str, ...]:
    """Validate a category list, dropping duplicates while keeping order."""
    result: list[str] = []
    for name in names:
        category = validate_category(name)
        if category not in result:
            result.append(category)
    if not result:
        raise ValidationError("Category list cannot be empty")
    return tuple(result)


def validate_manual_balances(balances: Mapping[str, float]) -> dict[str, float]:
    """Validate manual category balances, sanitizing the category keys."""
    result = {}
    for name, amount in balances.items():
        category = validate_category(name)
        try:
            result[category] = float(amount)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid balance for category '{name}': {amount!r}") from e
    return result


def validate_transaction(transaction: Transaction) -> Transaction:
    """Return a sanitized copy of a transaction, or raise ValidationError.

    Description, counterparties, method and note are sanitized. The
    description and category must be non-empty, the amount non-zero and the
    date set. Currency is not required here; stores fill in the default.
    """
    cleaned = replace(
        transaction,
        description=sanitize(transaction.description),
        from_party=sanitize(transaction.from_party),
        to_party=sanitize(transaction.to_party),
        method=sanitize(transaction.method),
        note=sanitize(transaction.note),
        category=sanitize(transaction.category),
    )
    if not cleaned.description:
        raise ValidationError(errors.empty_field("Transaction", "description"))
    if not cleaned.category:
        raise ValidationError(errors.empty_field("Transaction", "category"))
    if cleaned.amount == 0:
        raise ValidationError("Transaction 'amount' cannot be 0")
    if cleaned.date is None:
        raise ValidationError(errors.empty_field("Transaction", "date"))
    if cleaned.currency:
        validate_currency(cleaned.currency)
    return cleaned


def validate_template(template: RecurringTemplate) -> RecurringTemplate:
    """Return a sanitized copy of a recurring template, or raise ValidationError."""
    cleaned = replace(
        template,
        description=sanitize(template.description),
        from_party=sanitize(template.from_party),
        to_party=sanitize(template.to_party),
        method=sanitize(template.method),
        note=sanitize(template.note),
        category=sanitize(template.category),
    )
    if not cleaned.description:
        raise ValidationError(errors.empty_field("Recurring template", "description"))
    if not cleaned.category:
        raise ValidationError(errors.empty_field("Recurring template", "category"))
    if cleaned.amount == 0:
        raise ValidationError("Recurring template 'amount' cannot be 0")
    if cleaned.start_date is None:
        raise ValidationError(errors.empty_field("Recurring template", "start date"))
    if cleaned.interval not in {i.value for i in Interval}:
        raise ValidationError(f"Invalid recurrence interval: '{cleaned.interval}'")
    if cleaned.occurrences < 0:
        raise ValidationError("Recurring template 'occurrences' cannot be negative")
    if cleaned.occurrences > MAX_GENERATED_OCCURRENCES:
        raise ValidationError(
            f"Recurring template 'occurrences' cannot exceed {MAX_GENERATED_OCCURRENCES}"
        )
    if cleaned.currency:
        validate_currency(cleaned.currency)
    return cleaned


def validate_currency(currency: str) -> str:
    if currency not in SUPPORTED_CURRENCIES:
        raise ValidationError(errors.unsupported_currency(currency))
    return currency


def validate_language(language: str) -> str:
    if language not in SUPPORTED_LANGUAGES:
        raise ValidationError(errors.unsupported_language(language))
    return language


def validate_start_date(start_date: int) -> int:
    if start_date < 1 or start_date > 31:
        raise ValidationError(errors.start_date_out_of_range(start_date))
    return start_date
