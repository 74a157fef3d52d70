"""JSON file implementation of the Storage interface.

All state lives in memory behind one reader/writer lock and is written
through to two documents on every mutation: ``expenses.json`` (array of
transactions) and ``config.json`` (configuration plus recurring templates).
Each write replaces the whole file; the in-memory state is only swapped in
after the file write succeeded.

Recurring-template operations touch both documents. The rule is written to
``config.json`` first and the generated transactions to ``expenses.json``
second; a crash between the two leaves the rule without (or with stale)
instances. Running ``update_recurring_template(..., update_all=True)``
regenerates them.
"""

import json
import logging
import os
import tempfile
import uuid
from dataclasses import replace
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from spendbook.domain import errors
from spendbook.domain.entities import (
    Config,
    RecurringTemplate,
    Transaction,
    default_config,
    generate_transaction_id,
)
from spendbook.domain.errors import NotFoundError, PersistenceError, ValidationError
from spendbook.domain.recurrence import expand_template
from spendbook.domain.validation import (
    validate_categories,
    validate_currency,
    validate_language,
    validate_manual_balances,
    validate_start_date,
)
from spendbook.storage.base import Storage, prepare_template, prepare_transaction
from spendbook.storage.locking import ReadWriteLock
from spendbook.storage.mappers import (
    config_from_dict,
    config_to_dict,
    to_utc,
    transaction_from_dict,
    transaction_to_dict,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_FILE = "expenses.json"
CONFIG_FILE = "config.json"


def _newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class JSONStore(Storage):
    """File-backed implementation of Storage."""

    def __init__(self, data_dir: str | Path, defaults: Optional[Config] = None):
        """Open (or create) a JSON store.

        Args:
            data_dir: Directory holding the two JSON documents
            defaults: Configuration written when no config file exists yet
        """
        self.data_dir = Path(data_dir)
        self.transactions_path = self.data_dir / TRANSACTIONS_FILE
        self.config_path = self.data_dir / CONFIG_FILE
        self._defaults = defaults or default_config()
        self._lock = ReadWriteLock()

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError("open", f"cannot create data directory {self.data_dir}: {e}") from e

        self._config, self._templates = self._load_config()
        self._transactions = self._load_transactions()
        logger.info(
            "Opened JSON store at %s (%d transactions, %d recurring templates)",
            self.data_dir,
            len(self._transactions),
            len(self._templates),
        )

    # File I/O
    def _read_document(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError("load", f"cannot read {path}: {e}") from e

    def _write_document(self, path: Path, payload: Any, operation: str) -> None:
        """Atomically replace a document with ``payload``."""
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write %s during %s: %s", path, operation, e)
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise PersistenceError(operation, f"cannot write {path}: {e}") from e

    def _load_config(self) -> tuple[Config, list[RecurringTemplate]]:
        if not self.config_path.exists():
            self._write_document(self.config_path, config_to_dict(self._defaults, []), "init")
            return self._defaults, []
        try:
            return config_from_dict(self._read_document(self.config_path), self._defaults)
        except (TypeError, ValueError, AttributeError) as e:
            raise PersistenceError("load", f"malformed {self.config_path}: {e}") from e

    def _load_transactions(self) -> list[Transaction]:
        if not self.transactions_path.exists():
            self._write_document(self.transactions_path, [], "init")
            return []
        data = self._read_document(self.transactions_path)
        try:
            return _newest_first(transaction_from_dict(item) for item in data)
        except (TypeError, ValueError, AttributeError) as e:
            raise PersistenceError("load", f"malformed {self.transactions_path}: {e}") from e

    # Write-through commits; callers hold the write lock
    def _commit_config(self, config: Config, templates: list[RecurringTemplate], operation: str) -> None:
        self._write_document(self.config_path, config_to_dict(config, templates), operation)
        self._config = config
        self._templates = templates

    def _commit_transactions(self, transactions: list[Transaction], operation: str) -> None:
        ordered = _newest_first(transactions)
        self._write_document(
            self.transactions_path, [transaction_to_dict(t) for t in ordered], operation
        )
        self._transactions = ordered

    def _assign_ids(
        self, transactions: list[Transaction], config: Config, taken: set[str]
    ) -> tuple[list[Transaction], Config]:
        """Give every ID-less transaction the next sequence ID.

        Returns the transactions and a config with advanced counters; nothing
        is committed.
        """
        voucher, receipt = config.voucher_counter, config.receipt_counter
        result = []
        for txn in transactions:
            if txn.id:
                if txn.id in taken:
                    raise ValidationError(f"Transaction {txn.id} already exists")
            else:
                while True:
                    if txn.is_gain:
                        receipt += 1
                        candidate = generate_transaction_id(True, receipt)
                    else:
                        voucher += 1
                        candidate = generate_transaction_id(False, voucher)
                    if candidate not in taken:
                        break
                txn = replace(txn, id=candidate)
            taken.add(txn.id)
            result.append(txn)
        return result, replace(config, voucher_counter=voucher, receipt_counter=receipt)

    def _update_config(self, operation: str, **changes: Any) -> None:
        with self._lock.write():
            config = replace(self._config, **changes)
            self._commit_config(config, self._templates, operation)

    def close(self) -> None:
        """Nothing to release; every mutation is already on disk."""
        pass

    # Configuration
    def get_config(self) -> Config:
        with self._lock.read():
            return replace(self._config, manual_balances=dict(self._config.manual_balances))

    def get_categories(self) -> list[str]:
        with self._lock.read():
            return list(self._config.categories)

    def update_categories(self, categories: Iterable[str]) -> None:
        self._update_config("update_categories", categories=validate_categories(categories))

    def get_currency(self) -> str:
        with self._lock.read():
            return self._config.currency

    def update_currency(self, currency: str) -> None:
        self._update_config("update_currency", currency=validate_currency(currency))

    def get_start_date(self) -> int:
        with self._lock.read():
            return self._config.start_date

    def update_start_date(self, start_date: int) -> None:
        self._update_config("update_start_date", start_date=validate_start_date(start_date))

    def get_language(self) -> str:
        with self._lock.read():
            return self._config.language

    def update_language(self, language: str) -> None:
        self._update_config("update_language", language=validate_language(language))

    def get_opening_balance(self) -> float:
        with self._lock.read():
            return self._config.opening_balance

    def update_opening_balance(self, balance: float) -> None:
        self._update_config("update_opening_balance", opening_balance=float(balance))

    def get_use_manual_balances(self) -> bool:
        with self._lock.read():
            return self._config.use_manual_balances

    def update_use_manual_balances(self, use: bool) -> None:
        self._update_config("update_use_manual_balances", use_manual_balances=bool(use))

    def get_manual_balances(self) -> dict[str, float]:
        with self._lock.read():
            return dict(self._config.manual_balances)

    def update_manual_balances(self, balances: Mapping[str, float]) -> None:
        self._update_config(
            "update_manual_balances", manual_balances=validate_manual_balances(balances)
        )

    # Transactions
    def get_all_transactions(self) -> list[Transaction]:
        with self._lock.read():
            return list(self._transactions)

    def get_transaction(self, transaction_id: str) -> Transaction:
        with self._lock.read():
            for txn in self._transactions:
                if txn.id == transaction_id:
                    return txn
        raise NotFoundError(errors.transaction_not_found(transaction_id))

    def add_transaction(self, transaction: Transaction) -> str:
        with self._lock.write():
            txn = prepare_transaction(transaction, self._config.currency)
            taken = {t.id for t in self._transactions}
            (txn,), config = self._assign_ids([txn], self._config, taken)
            if config != self._config:
                self._commit_config(config, self._templates, "add_transaction")
            self._commit_transactions(self._transactions + [txn], "add_transaction")
            return txn.id

    def add_transactions(self, transactions: Iterable[Transaction]) -> list[str]:
        return [self.add_transaction(txn) for txn in transactions]

    def remove_transaction(self, transaction_id: str) -> None:
        with self._lock.write():
            remaining = [t for t in self._transactions if t.id != transaction_id]
            if len(remaining) == len(self._transactions):
                raise NotFoundError(errors.transaction_not_found(transaction_id))
            self._commit_transactions(remaining, "remove_transaction")

    def remove_transactions(self, transaction_ids: Iterable[str]) -> None:
        ids = set(transaction_ids)
        if not ids:
            return
        with self._lock.write():
            remaining = [t for t in self._transactions if t.id not in ids]
            if len(remaining) != len(self._transactions):
                self._commit_transactions(remaining, "remove_transactions")

    def update_transaction(self, transaction_id: str, transaction: Transaction) -> None:
        with self._lock.write():
            for index, existing in enumerate(self._transactions):
                if existing.id == transaction_id:
                    break
            else:
                raise NotFoundError(errors.transaction_not_found(transaction_id))
            txn = prepare_transaction(
                replace(transaction, id=transaction_id), self._config.currency
            )
            updated = list(self._transactions)
            updated[index] = txn
            self._commit_transactions(updated, "update_transaction")

    # Recurring templates
    def get_recurring_templates(self) -> list[RecurringTemplate]:
        with self._lock.read():
            return list(self._templates)

    def get_recurring_template(self, template_id: str) -> RecurringTemplate:
        with self._lock.read():
            for template in self._templates:
                if template.id == template_id:
                    return template
        raise NotFoundError(errors.template_not_found(template_id))

    def _template_index(self, template_id: str) -> int:
        for index, template in enumerate(self._templates):
            if template.id == template_id:
                return index
        raise NotFoundError(errors.template_not_found(template_id))

    def _store_generated(
        self,
        operation: str,
        templates: list[RecurringTemplate],
        kept: list[Transaction],
        generated: list[Transaction],
    ) -> None:
        """Write the rule first, then the regenerated transactions."""
        generated, config = self._assign_ids(generated, self._config, {t.id for t in kept})
        self._commit_config(config, templates, operation)
        self._commit_transactions(kept + generated, operation)

    def add_recurring_template(self, template: RecurringTemplate) -> str:
        with self._lock.write():
            template = prepare_template(template, self._config.currency)
            if not template.id:
                template = replace(template, id=str(uuid.uuid4()))
            elif any(t.id == template.id for t in self._templates):
                raise ValidationError(f"Recurring template {template.id} already exists")

            generated = expand_template(template, from_today=False)
            self._store_generated(
                "add_recurring_template",
                self._templates + [template],
                list(self._transactions),
                generated,
            )
            logger.info(
                "Added recurring template %s with %d transactions", template.id, len(generated)
            )
            return template.id

    def update_recurring_template(
        self,
        template_id: str,
        template: RecurringTemplate,
        update_all: bool,
        now: Optional[datetime] = None,
    ) -> None:
        now = to_utc(now) if now is not None else datetime.now(UTC)
        with self._lock.write():
            index = self._template_index(template_id)
            template = prepare_template(replace(template, id=template_id), self._config.currency)

            if update_all:
                kept = [t for t in self._transactions if t.recurring_id != template_id]
            else:
                kept = [
                    t for t in self._transactions
                    if t.recurring_id != template_id or t.date <= now
                ]
            generated = expand_template(template, from_today=not update_all, now=now)

            removed = len(self._transactions) - len(kept)
            templates = list(self._templates)
            templates[index] = template
            self._store_generated("update_recurring_template", templates, kept, generated)
            logger.info(
                "Updated recurring template %s (update_all=%s): replaced %d transactions with %d",
                template_id,
                update_all,
                removed,
                len(generated),
            )

    def remove_recurring_template(
        self,
        template_id: str,
        remove_all: bool,
        now: Optional[datetime] = None,
    ) -> None:
        now = to_utc(now) if now is not None else datetime.now(UTC)
        with self._lock.write():
            index = self._template_index(template_id)
            templates = self._templates[:index] + self._templates[index + 1:]

            if remove_all:
                kept = [t for t in self._transactions if t.recurring_id != template_id]
            else:
                kept = [
                    t for t in self._transactions
                    if t.recurring_id != template_id or t.date <= now
                ]

            removed = len(self._transactions) - len(kept)
            self._commit_config(self._config, templates, "remove_recurring_template")
            self._commit_transactions(kept, "remove_recurring_template")
            logger.info(
                "Removed recurring template %s (remove_all=%s) and %d transactions",
                template_id,
                remove_all,
                removed,
            )
