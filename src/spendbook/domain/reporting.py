"""Period-bounded aggregation of transactions.

Pure functions over transaction lists: month windows that honour a custom
first day of the month, sign/category filtering, dashboard summaries,
period grouping for reports and trial-balance statements.
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from spendbook.domain.entities import Transaction
from spendbook.utils.date_parser import as_utc

UNCATEGORIZED = "Uncategorized"


class TransactionKind(str, Enum):
    """Sign filter: expenses are outflows, gains are inflows."""

    EXPENSES = "expenses"
    GAINS = "gains"

    def matches(self, amount: float) -> bool:
        if self is TransactionKind.EXPENSES:
            return amount < 0
        return amount > 0


class ReportPeriod(str, Enum):
    """Bucket size for report grouping."""

    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    amount: float


@dataclass(frozen=True)
class PeriodSummary:
    """Dashboard totals for a set of transactions.

    ``total_expenses`` is reported as a positive magnitude.
    """

    total_expenses: float
    total_gains: float
    balance: float
    expenses_by_category: tuple[CategoryTotal, ...]
    gains_by_category: tuple[CategoryTotal, ...]
    transaction_count: int


@dataclass(frozen=True)
class TrialBalance:
    """Trial-balance statement.

    Debits list expenses per category and credits list gains per category.
    The closing balance sits on the debit side and the opening balance on the
    credit side, so ``total_debits == total_credits``.
    """

    opening_balance: float
    debits: tuple[CategoryTotal, ...]
    credits: tuple[CategoryTotal, ...]
    total_expenses: float
    total_gains: float
    closing_balance: float
    total_debits: float
    total_credits: float
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    manual_categories: frozenset[str] = field(default_factory=frozenset)


def _clamped_start(year: int, month: int, start_date: int) -> datetime:
    day = min(start_date, calendar.monthrange(year, month)[1])
    return datetime(year, month, day, tzinfo=UTC)


def month_window(year: int, month: int, start_date: int = 1) -> tuple[datetime, datetime]:
    """Return the inclusive (start, end) bounds of an expense month.

    With ``start_date`` 1 this is the calendar month. Otherwise the window
    runs from ``start_date`` of the given month up to the second before
    ``start_date`` of the following month, wrapping the year after December.
    Days past the end of a short month clamp to its last day.

    For example, start date 5 and March 2024 give 2024-03-05 00:00:00 up to
    2024-04-04 23:59:59 UTC.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    start = _clamped_start(year, month, start_date)
    end = _clamped_start(next_year, next_month, start_date) - timedelta(seconds=1)
    return start, end


def month_containing(when: datetime, start_date: int = 1) -> tuple[int, int]:
    """Return the (year, month) of the expense month that contains ``when``."""
    when = as_utc(when)
    start, _ = month_window(when.year, when.month, start_date)
    if when >= start:
        return when.year, when.month
    if when.month == 1:
        return when.year - 1, 12
    return when.year, when.month - 1


def filter_transactions(
    transactions: Iterable[Transaction],
    kind: Optional[TransactionKind] = None,
    window: Optional[tuple[Optional[datetime], Optional[datetime]]] = None,
    category: Optional[str] = None,
) -> list[Transaction]:
    """Filter transactions by sign, inclusive date window and category."""
    start, end = window if window is not None else (None, None)
    start = as_utc(start) if start is not None else None
    end = as_utc(end) if end is not None else None

    result = []
    for txn in transactions:
        if kind is not None and not kind.matches(txn.amount):
            continue
        if category and txn.category != category:
            continue
        if start is not None or end is not None:
            if txn.date is None:
                continue
            when = as_utc(txn.date)
            if start is not None and when < start:
                continue
            if end is not None and when > end:
                continue
        result.append(txn)
    return result


def category_totals(transactions: Iterable[Transaction], kind: TransactionKind) -> dict[str, float]:
    """Sum absolute amounts per category for transactions of one kind."""
    totals: dict[str, float] = defaultdict(float)
    for txn in transactions:
        if kind.matches(txn.amount):
            totals[txn.category or UNCATEGORIZED] += abs(txn.amount)
    return dict(totals)


def _sorted_totals(totals: Mapping[str, float]) -> tuple[CategoryTotal, ...]:
    return tuple(
        CategoryTotal(category=name, amount=amount)
        for name, amount in sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    )


def summarize(transactions: Sequence[Transaction]) -> PeriodSummary:
    """Build dashboard totals for already-filtered transactions."""
    expenses = category_totals(transactions, TransactionKind.EXPENSES)
    gains = category_totals(transactions, TransactionKind.GAINS)
    total_expenses = sum(expenses.values())
    total_gains = sum(gains.values())
    return PeriodSummary(
        total_expenses=total_expenses,
        total_gains=total_gains,
        balance=total_gains - total_expenses,
        expenses_by_category=_sorted_totals(expenses),
        gains_by_category=_sorted_totals(gains),
        transaction_count=len(transactions),
    )


def period_key(when: datetime, period: ReportPeriod) -> str:
    """Return the grouping key of a date for a report period."""
    when = as_utc(when)
    if period is ReportPeriod.DAILY:
        return when.strftime("%Y-%m-%d")
    if period is ReportPeriod.MONTHLY:
        return when.strftime("%Y-%m")
    return when.strftime("%Y")


def group_by_period(
    transactions: Iterable[Transaction], period: ReportPeriod
) -> dict[str, list[Transaction]]:
    """Group transactions into period buckets, keys in chronological order.

    Transactions inside a bucket are sorted oldest first.
    """
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        if txn.date is not None:
            grouped[period_key(txn.date, period)].append(txn)
    return {
        key: sorted(grouped[key], key=lambda t: as_utc(t.date))
        for key in sorted(grouped)
    }


def build_trial_balance(
    transactions: Iterable[Transaction],
    opening_balance: float,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    manual_balances: Optional[Mapping[str, float]] = None,
) -> TrialBalance:
    """Compute a trial balance over an optional inclusive date range.

    closing = opening + gains - expenses; total debits = expenses + closing;
    total credits = opening + gains.

    Args:
        transactions: Transactions to consider
        opening_balance: Balance carried into the period
        start: Optional inclusive lower date bound
        end: Optional inclusive upper date bound
        manual_balances: Optional category overrides. A listed category's
            computed total is replaced by the manual figure: positive figures
            count as credits, negative ones as debits.

    Returns:
        TrialBalance with per-category debits and credits
    """
    selected = filter_transactions(transactions, window=(start, end))
    debits = category_totals(selected, TransactionKind.EXPENSES)
    credits = category_totals(selected, TransactionKind.GAINS)

    manual = dict(manual_balances or {})
    for name, amount in manual.items():
        debits.pop(name, None)
        credits.pop(name, None)
        if amount < 0:
            debits[name] = abs(amount)
        elif amount > 0:
            credits[name] = amount

    total_expenses = sum(debits.values())
    total_gains = sum(credits.values())
    closing_balance = opening_balance + total_gains - total_expenses

    return TrialBalance(
        opening_balance=opening_balance,
        debits=_sorted_totals(debits),
        credits=_sorted_totals(credits),
        total_expenses=total_expenses,
        total_gains=total_gains,
        closing_balance=closing_balance,
        total_debits=total_expenses + closing_balance,
        total_credits=opening_balance + total_gains,
        start=start,
        end=end,
        manual_categories=frozenset(manual),
    )
