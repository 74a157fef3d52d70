"""Abstract storage interface."""

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, UTC
from typing import Iterable, Mapping, Optional

from spendbook.domain.entities import Config, RecurringTemplate, Transaction
from spendbook.domain.validation import validate_template, validate_transaction
from spendbook.storage.mappers import to_utc


def prepare_transaction(
    transaction: Transaction, default_currency: str, now: Optional[datetime] = None
) -> Transaction:
    """Fill in the default currency and date, normalize the date to UTC, then validate."""
    if not transaction.currency:
        transaction = replace(transaction, currency=default_currency)
    when = transaction.date if transaction.date is not None else now or datetime.now(UTC)
    transaction = replace(transaction, date=to_utc(when))
    return validate_transaction(transaction)


def prepare_template(template: RecurringTemplate, default_currency: str) -> RecurringTemplate:
    """Fill in the default currency, normalize the start date to UTC, then validate."""
    if not template.currency:
        template = replace(template, currency=default_currency)
    if template.start_date is not None:
        template = replace(template, start_date=to_utc(template.start_date))
    return validate_template(template)


class Storage(ABC):
    """Abstract storage interface for spendbook.

    Implementations own the canonical copy of all entities and return fresh
    instances. Mutators raise ``ValidationError`` for bad input,
    ``NotFoundError`` for unknown IDs and ``PersistenceError`` when the
    backing store fails.
    """

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""
        pass

    # Configuration
    @abstractmethod
    def get_config(self) -> Config:
        """Get the configuration, creating the defaults on first access."""
        pass

    @abstractmethod
    def get_categories(self) -> list[str]:
        pass

    @abstractmethod
    def update_categories(self, categories: Iterable[str]) -> None:
        """Replace the category list (names are sanitized, duplicates dropped)."""
        pass

    @abstractmethod
    def get_currency(self) -> str:
        pass

    @abstractmethod
    def update_currency(self, currency: str) -> None:
        """Set the default currency. Must be a supported currency code."""
        pass

    @abstractmethod
    def get_start_date(self) -> int:
        pass

    @abstractmethod
    def update_start_date(self, start_date: int) -> None:
        """Set the first day of the expense month (1-31)."""
        pass

    @abstractmethod
    def get_language(self) -> str:
        pass

    @abstractmethod
    def update_language(self, language: str) -> None:
        pass

    @abstractmethod
    def get_opening_balance(self) -> float:
        pass

    @abstractmethod
    def update_opening_balance(self, balance: float) -> None:
        pass

    @abstractmethod
    def get_use_manual_balances(self) -> bool:
        pass

    @abstractmethod
    def update_use_manual_balances(self, use: bool) -> None:
        pass

    @abstractmethod
    def get_manual_balances(self) -> dict[str, float]:
        pass

    @abstractmethod
    def update_manual_balances(self, balances: Mapping[str, float]) -> None:
        pass

    # Transactions
    @abstractmethod
    def get_all_transactions(self) -> list[Transaction]:
        """List all transactions, newest first."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Transaction:
        """Get transaction by ID. Raises NotFoundError if missing."""
        pass

    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> str:
        """Add a transaction. Returns its ID.

        An empty ID is replaced by the next ``BAU-``/``RES-`` sequence ID, an
        empty currency by the configured default and a missing date by now.
        """
        pass

    @abstractmethod
    def add_transactions(self, transactions: Iterable[Transaction]) -> list[str]:
        """Add several transactions one by one. Not atomic as a batch."""
        pass

    @abstractmethod
    def remove_transaction(self, transaction_id: str) -> None:
        """Remove a transaction. Raises NotFoundError if missing."""
        pass

    @abstractmethod
    def remove_transactions(self, transaction_ids: Iterable[str]) -> None:
        """Remove all listed transactions; unknown IDs are ignored."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: str, transaction: Transaction) -> None:
        """Replace a transaction's fields. Raises NotFoundError if missing."""
        pass

    # Recurring templates
    @abstractmethod
    def get_recurring_templates(self) -> list[RecurringTemplate]:
        pass

    @abstractmethod
    def get_recurring_template(self, template_id: str) -> RecurringTemplate:
        """Get a recurring template by ID. Raises NotFoundError if missing."""
        pass

    @abstractmethod
    def add_recurring_template(self, template: RecurringTemplate) -> str:
        """Store a template and generate all of its transactions. Returns its ID."""
        pass

    @abstractmethod
    def update_recurring_template(
        self,
        template_id: str,
        template: RecurringTemplate,
        update_all: bool,
        now: Optional[datetime] = None,
    ) -> None:
        """Replace a template and regenerate its transactions.

        Args:
            template_id: Template to update
            template: New template fields
            update_all: If True, regenerate every instance from the start date.
                Otherwise only instances dated after ``now`` are replaced.
            now: Boundary between past and future instances (defaults to now)
        """
        pass

    @abstractmethod
    def remove_recurring_template(
        self,
        template_id: str,
        remove_all: bool,
        now: Optional[datetime] = None,
    ) -> None:
        """Delete a template and all (or only future) generated instances."""
        pass
