"""Domain layer for spendbook.

Services that need a Storage (``spendbook.domain.report``) are imported
from their modules directly to keep this package free of storage imports.
"""

from spendbook.domain.entities import Config, Interval, RecurringTemplate, Transaction
from spendbook.domain.errors import DomainError, NotFoundError, PersistenceError, ValidationError

__all__ = [
    "Config",
    "DomainError",
    "Interval",
    "NotFoundError",
    "PersistenceError",
    "RecurringTemplate",
    "Transaction",
    "ValidationError",
]
