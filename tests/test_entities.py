"""Tests for domain entities and the currency table."""

from dataclasses import FrozenInstanceError
from datetime import datetime, UTC

import pytest

from spendbook.domain.currency import (
    CURRENCY_FORMATS,
    FALLBACK_FORMAT,
    SUPPORTED_CURRENCIES,
    format_amount,
    get_currency_format,
)
from spendbook.domain.entities import (
    DEFAULT_CATEGORIES,
    Config,
    Interval,
    Transaction,
    default_config,
    generate_transaction_id,
)


class TestTransaction:
    """Tests for Transaction entity."""

    def test_defaults(self):
        """Optional fields default to empty values."""
        txn = Transaction(
            description="Lunch",
            category="Food",
            amount=-12.0,
            date=datetime(2024, 1, 15, tzinfo=UTC),
        )
        assert txn.id == ""
        assert txn.currency == ""
        assert txn.recurring_id is None
        assert txn.from_party == txn.to_party == txn.method == txn.note == ""

    def test_is_gain(self, make_transaction):
        """Positive amounts are gains, negative amounts expenses."""
        assert make_transaction(amount=100).is_gain
        assert not make_transaction(amount=-100).is_gain

    def test_frozen(self, make_transaction):
        """Entities cannot be mutated in place."""
        txn = make_transaction()
        with pytest.raises(FrozenInstanceError):
            txn.amount = 10


class TestConfig:
    """Tests for Config defaults."""

    def test_default_config(self):
        config = default_config()
        assert config.categories == DEFAULT_CATEGORIES
        assert len(config.categories) == 10
        assert config.currency == "usd"
        assert config.start_date == 1
        assert config.language == "en"
        assert config.voucher_counter == 0
        assert config.receipt_counter == 0
        assert config.opening_balance == 0.0
        assert config.use_manual_balances is False
        assert config.manual_balances == {}

    def test_default_config_overrides(self):
        """Callers can supply other defaults."""
        config = default_config(categories=("A", "B"), currency="eur", start_date=25)
        assert config.categories == ("A", "B")
        assert config.currency == "eur"
        assert config.start_date == 25

    def test_manual_balances_not_shared(self):
        """Each Config gets its own manual balance mapping."""
        first = Config(categories=("A",), currency="usd", start_date=1, language="en")
        second = Config(categories=("A",), currency="usd", start_date=1, language="en")
        assert first.manual_balances is not second.manual_balances


class TestTransactionId:
    """Tests for sequence ID generation."""

    @pytest.mark.parametrize(
        "is_gain, counter, expected",
        [
            (False, 1, "BAU-0001"),
            (True, 1, "RES-0001"),
            (False, 42, "BAU-0042"),
            (True, 12345, "RES-12345"),
        ],
    )
    def test_generate_transaction_id(self, is_gain, counter, expected):
        assert generate_transaction_id(is_gain, counter) == expected


def test_interval_values():
    """Intervals use their lowercase names as values."""
    assert [i.value for i in Interval] == ["daily", "weekly", "monthly", "yearly"]


class TestCurrency:
    """Tests for the currency format table."""

    def test_supported_currencies_match_table(self):
        """The supported set is derived from the format table."""
        assert SUPPORTED_CURRENCIES == {fmt.code for fmt in CURRENCY_FORMATS}
        assert {"usd", "eur", "myr", "jpy", "pln"} <= SUPPORTED_CURRENCIES
        assert "xyz" not in SUPPORTED_CURRENCIES

    def test_unknown_currency_uses_fallback(self):
        assert get_currency_format("xyz") is FALLBACK_FORMAT
        assert format_amount(5, "xyz") == "$5.00"

    @pytest.mark.parametrize(
        "amount, currency, expected",
        [
            (1234.5, "usd", "$1,234.50"),
            (-1234.5, "usd", "$1,234.50"),
            (1234.5, "eur", "€1.234,50"),
            (1234.5, "pln", "1.234,50 zł"),
            (1234.5, "jpy", "¥1,234"),
            (1234567, "vnd", "1.234.567 ₫"),
            (99.99, "myr", "RM99.99"),
            (10, "chf", "10.00 Fr"),
        ],
    )
    def test_format_amount(self, amount, currency, expected):
        assert format_amount(amount, currency) == expected
