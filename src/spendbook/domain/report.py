"""Report domain service."""

from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional

from spendbook.domain.entities import Transaction
from spendbook.domain.reporting import (
    PeriodSummary,
    ReportPeriod,
    TransactionKind,
    TrialBalance,
    build_trial_balance,
    filter_transactions,
    group_by_period,
    month_containing,
    month_window,
    summarize,
)
from spendbook.storage.base import Storage


@dataclass(frozen=True)
class MonthlySummary:
    """Dashboard view of one expense month."""

    year: int
    month: int
    start: datetime
    end: datetime
    currency: str
    summary: PeriodSummary


@dataclass(frozen=True)
class TransactionReport:
    """Transactions of one kind, grouped by period."""

    kind: TransactionKind
    period: ReportPeriod
    category: Optional[str]
    currency: str
    groups: dict[str, list[Transaction]]
    total: float


class ReportService:
    """Service for building summaries, reports and statements from storage."""

    def __init__(self, storage: Storage):
        """Initialize report service.

        Args:
            storage: Storage instance
        """
        self.storage = storage

    def month_window(self, year: int, month: int) -> tuple[datetime, datetime]:
        """Bounds of an expense month using the configured start date."""
        return month_window(year, month, self.storage.get_start_date())

    def current_month(self, now: Optional[datetime] = None) -> tuple[int, int]:
        """(year, month) of the expense month containing ``now``."""
        now = now or datetime.now(UTC)
        return month_containing(now, self.storage.get_start_date())

    def monthly_summary(self, year: int, month: int) -> MonthlySummary:
        """Totals and per-category breakdown for one expense month."""
        config = self.storage.get_config()
        start, end = month_window(year, month, config.start_date)
        transactions = filter_transactions(
            self.storage.get_all_transactions(), window=(start, end)
        )
        return MonthlySummary(
            year=year,
            month=month,
            start=start,
            end=end,
            currency=config.currency,
            summary=summarize(transactions),
        )

    def report(
        self,
        kind: TransactionKind,
        period: ReportPeriod = ReportPeriod.MONTHLY,
        year: Optional[int] = None,
        month: Optional[int] = None,
        category: Optional[str] = None,
    ) -> TransactionReport:
        """Expenses or gains, optionally limited to one expense month and category.

        Args:
            kind: Expenses (negative amounts) or gains (positive amounts)
            period: Grouping of the returned transactions
            year: Year of the expense month (requires ``month``)
            month: Month of the expense month (requires ``year``)
            category: Optional exact category name

        Returns:
            TransactionReport with transactions grouped by period key
        """
        config = self.storage.get_config()
        window = None
        if year is not None and month is not None:
            window = month_window(year, month, config.start_date)

        transactions = filter_transactions(
            self.storage.get_all_transactions(),
            kind=kind,
            window=window,
            category=category,
        )
        return TransactionReport(
            kind=kind,
            period=period,
            category=category,
            currency=config.currency,
            groups=group_by_period(transactions, period),
            total=sum(abs(t.amount) for t in transactions),
        )

    def trial_balance(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> TrialBalance:
        """Trial balance using the stored opening balance.

        Manual category balances are applied when the manual balance toggle
        is on.
        """
        config = self.storage.get_config()
        manual = config.manual_balances if config.use_manual_balances else None
        return build_trial_balance(
            self.storage.get_all_transactions(),
            opening_balance=config.opening_balance,
            start=start,
            end=end,
            manual_balances=manual,
        )
