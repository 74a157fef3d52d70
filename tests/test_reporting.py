"""Tests for the aggregation and trial-balance engine."""

from datetime import datetime, UTC

import pytest

from spendbook.domain.reporting import (
    UNCATEGORIZED,
    CategoryTotal,
    ReportPeriod,
    TransactionKind,
    build_trial_balance,
    category_totals,
    filter_transactions,
    group_by_period,
    month_containing,
    month_window,
    summarize,
)


def _at(year, month, day, hour=12):
    return datetime(year, month, day, hour, tzinfo=UTC)


@pytest.fixture
def ledger(make_transaction):
    """A small set of expenses and gains across two months."""
    return [
        make_transaction(id="BAU-0001", category="Rent", amount=-200, date=_at(2024, 3, 5)),
        make_transaction(id="BAU-0002", category="Food", amount=-30, date=_at(2024, 3, 12)),
        make_transaction(id="BAU-0003", category="Food", amount=-20, date=_at(2024, 4, 2)),
        make_transaction(id="RES-0001", category="Income", amount=500, date=_at(2024, 3, 25)),
        make_transaction(id="RES-0002", category="Income", amount=100, date=_at(2024, 4, 25)),
    ]


class TestMonthWindow:
    """Tests for expense-month windows."""

    def test_calendar_month(self):
        start, end = month_window(2024, 2)
        assert start == datetime(2024, 2, 1, tzinfo=UTC)
        assert end == datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC)

    def test_custom_start_date(self):
        """Start date 5 for March 2024 runs from March 5 to April 4."""
        start, end = month_window(2024, 3, 5)
        assert start == datetime(2024, 3, 5, 0, 0, 0, tzinfo=UTC)
        assert end == datetime(2024, 4, 4, 23, 59, 59, tzinfo=UTC)

    def test_december_wraps_year(self):
        start, end = month_window(2024, 12, 25)
        assert start == datetime(2024, 12, 25, tzinfo=UTC)
        assert end == datetime(2025, 1, 24, 23, 59, 59, tzinfo=UTC)

    def test_start_date_clamps_to_month_end(self):
        """Day 31 in February starts on the last day of February."""
        start, end = month_window(2024, 2, 31)
        assert start == datetime(2024, 2, 29, tzinfo=UTC)
        assert end == datetime(2024, 3, 30, 23, 59, 59, tzinfo=UTC)

    def test_consecutive_windows_do_not_overlap(self):
        _, jan_end = month_window(2024, 1, 31)
        feb_start, _ = month_window(2024, 2, 31)
        assert (feb_start - jan_end).total_seconds() == 1

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_window(2024, 13)

    def test_month_containing(self):
        assert month_containing(_at(2024, 3, 4), 5) == (2024, 2)
        assert month_containing(_at(2024, 3, 5), 5) == (2024, 3)
        assert month_containing(_at(2024, 1, 10), 25) == (2023, 12)
        assert month_containing(_at(2024, 7, 1), 1) == (2024, 7)


class TestFilterAndSummarize:
    """Tests for filtering and dashboard summaries."""

    def test_filter_by_kind(self, ledger):
        expenses = filter_transactions(ledger, kind=TransactionKind.EXPENSES)
        gains = filter_transactions(ledger, kind=TransactionKind.GAINS)
        assert {t.id for t in expenses} == {"BAU-0001", "BAU-0002", "BAU-0003"}
        assert {t.id for t in gains} == {"RES-0001", "RES-0002"}

    def test_filter_window_is_inclusive(self, ledger):
        window = (_at(2024, 3, 5), _at(2024, 3, 25))
        selected = filter_transactions(ledger, window=window)
        assert {t.id for t in selected} == {"BAU-0001", "BAU-0002", "RES-0001"}

    def test_filter_by_category(self, ledger):
        selected = filter_transactions(ledger, category="Food")
        assert {t.id for t in selected} == {"BAU-0002", "BAU-0003"}

    def test_category_totals_are_absolute(self, ledger):
        assert category_totals(ledger, TransactionKind.EXPENSES) == {"Rent": 200, "Food": 50}

    def test_empty_category_is_uncategorized(self, make_transaction):
        txn = make_transaction(category="", amount=-5)
        assert category_totals([txn], TransactionKind.EXPENSES) == {UNCATEGORIZED: 5}

    def test_summarize_march(self, ledger):
        window = month_window(2024, 3)
        summary = summarize(filter_transactions(ledger, window=window))

        assert summary.total_expenses == 230
        assert summary.total_gains == 500
        assert summary.balance == 270
        assert summary.transaction_count == 3
        assert summary.expenses_by_category == (
            CategoryTotal("Rent", 200),
            CategoryTotal("Food", 30),
        )
        assert summary.gains_by_category == (CategoryTotal("Income", 500),)

    def test_summarize_empty(self):
        summary = summarize([])
        assert summary.total_expenses == 0
        assert summary.balance == 0
        assert summary.expenses_by_category == ()


class TestGroupByPeriod:
    """Tests for report grouping."""

    def test_monthly_groups_in_order(self, ledger):
        groups = group_by_period(ledger, ReportPeriod.MONTHLY)
        assert list(groups) == ["2024-03", "2024-04"]
        assert [t.id for t in groups["2024-03"]] == ["BAU-0001", "BAU-0002", "RES-0001"]

    def test_daily_and_yearly_keys(self, ledger):
        assert list(group_by_period(ledger[:2], ReportPeriod.DAILY)) == [
            "2024-03-05",
            "2024-03-12",
        ]
        assert list(group_by_period(ledger, ReportPeriod.YEARLY)) == ["2024"]


class TestTrialBalance:
    """Tests for trial-balance statements."""

    def test_basic_statement(self, make_transaction):
        """Opening 1000, Rent -200 and Income +500 close at 1300."""
        transactions = [
            make_transaction(category="Rent", amount=-200),
            make_transaction(category="Income", amount=500),
        ]
        balance = build_trial_balance(transactions, opening_balance=1000)

        assert balance.total_expenses == 200
        assert balance.total_gains == 500
        assert balance.closing_balance == 1300
        assert balance.total_debits == 1500
        assert balance.total_credits == 1500
        assert balance.debits == (CategoryTotal("Rent", 200),)
        assert balance.credits == (CategoryTotal("Income", 500),)

    def test_identity_holds(self, ledger):
        """Debits always equal credits."""
        for opening in (0, 250.75, -1000):
            balance = build_trial_balance(ledger, opening_balance=opening)
            assert balance.total_debits == pytest.approx(balance.total_credits)
            assert balance.closing_balance == pytest.approx(
                opening + balance.total_gains - balance.total_expenses
            )

    def test_date_range(self, ledger):
        balance = build_trial_balance(
            ledger, opening_balance=0, start=_at(2024, 4, 1, 0), end=_at(2024, 4, 30, 0)
        )
        assert balance.total_expenses == 20
        assert balance.total_gains == 100
        assert balance.closing_balance == 80

    def test_manual_balances_override_categories(self, ledger):
        """Manual figures replace computed totals on their natural side."""
        balance = build_trial_balance(
            ledger,
            opening_balance=0,
            manual_balances={"Food": -75, "Interest": 10, "Rent": 0},
        )
        debits = {item.category: item.amount for item in balance.debits}
        credits = {item.category: item.amount for item in balance.credits}

        assert debits == {"Food": 75}
        assert credits == {"Income": 600, "Interest": 10}
        assert balance.manual_categories == frozenset({"Food", "Interest", "Rent"})
        assert balance.total_debits == pytest.approx(balance.total_credits)
