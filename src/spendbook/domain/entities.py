"""Domain model entities for spendbook.

These are pure data classes, independent of how either storage backend lays
them out. Stores always hand out fresh instances, so callers can never mutate
the canonical copy.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from spendbook.domain.currency import SUPPORTED_CURRENCIES

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Groceries",
    "Travel",
    "Rent",
    "Utilities",
    "Entertainment",
    "Healthcare",
    "Shopping",
    "Miscellaneous",
    "Income",
)
DEFAULT_CURRENCY = "usd"
DEFAULT_START_DATE = 1
DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES: frozenset[str] = frozenset({"en", "ms"})

__all__ = [
    "Config",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CURRENCY",
    "DEFAULT_LANGUAGE",
    "DEFAULT_START_DATE",
    "Interval",
    "RecurringTemplate",
    "SUPPORTED_CURRENCIES",
    "SUPPORTED_LANGUAGES",
    "Transaction",
    "default_config",
    "generate_transaction_id",
]


class Interval(str, Enum):
    """Recognized recurrence intervals."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class Transaction:
    """A single monetary movement.

    Negative amounts are outflows (expenses), positive amounts are inflows
    (gains). An empty ``id`` asks the store to assign one.
    """

    description: str
    category: str
    amount: float
    date: Optional[datetime]
    id: str = ""
    currency: str = ""
    from_party: str = ""
    to_party: str = ""
    method: str = ""
    note: str = ""
    recurring_id: Optional[str] = None

    @property
    def is_gain(self) -> bool:
        return self.amount > 0


@dataclass(frozen=True)
class RecurringTemplate:
    """Rule describing a repeating transaction.

    ``occurrences == 0`` means the template repeats indefinitely.
    """

    description: str
    category: str
    amount: float
    start_date: Optional[datetime]
    interval: str
    occurrences: int = 0
    id: str = ""
    currency: str = ""
    from_party: str = ""
    to_party: str = ""
    method: str = ""
    note: str = ""


@dataclass(frozen=True)
class Config:
    """Process-wide configuration singleton."""

    categories: tuple[str, ...]
    currency: str
    start_date: int
    language: str
    voucher_counter: int = 0
    receipt_counter: int = 0
    opening_balance: float = 0.0
    use_manual_balances: bool = False
    manual_balances: dict[str, float] = field(default_factory=dict)


def default_config(
    categories: tuple[str, ...] = DEFAULT_CATEGORIES,
    currency: str = DEFAULT_CURRENCY,
    start_date: int = DEFAULT_START_DATE,
    language: str = DEFAULT_LANGUAGE,
) -> Config:
    """Build the configuration used when none has been persisted yet."""
    return Config(
        categories=tuple(categories),
        currency=currency,
        start_date=start_date,
        language=language,
    )


def generate_transaction_id(is_gain: bool, counter: int) -> str:
    """Build a sequence ID: ``RES-0001`` for gains, ``BAU-0001`` for expenses."""
    prefix = "RES" if is_gain else "BAU"
    return f"{prefix}-{counter:04d}"
