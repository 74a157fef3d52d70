"""Behavior shared by both storage backends."""

from dataclasses import replace
from datetime import datetime, UTC

import pytest

from spendbook.domain.entities import DEFAULT_CATEGORIES
from spendbook.domain.errors import NotFoundError, ValidationError


def _instances(store, template_id):
    return sorted(
        (t for t in store.get_all_transactions() if t.recurring_id == template_id),
        key=lambda t: t.date,
    )


class TestConfiguration:
    """Configuration getters and setters."""

    def test_defaults_on_first_access(self, store):
        config = store.get_config()
        assert config.categories == DEFAULT_CATEGORIES
        assert config.currency == "usd"
        assert config.start_date == 1
        assert config.language == "en"
        assert store.get_opening_balance() == 0
        assert store.get_use_manual_balances() is False
        assert store.get_manual_balances() == {}

    def test_update_currency(self, store):
        store.update_currency("eur")
        assert store.get_currency() == "eur"

    def test_unsupported_currency_leaves_config_unchanged(self, store):
        with pytest.raises(ValidationError):
            store.update_currency("xyz")
        assert store.get_currency() == "usd"

    def test_start_date_range(self, store):
        store.update_start_date(25)
        assert store.get_start_date() == 25
        for bad in (0, 32):
            with pytest.raises(ValidationError):
                store.update_start_date(bad)
        assert store.get_start_date() == 25

    def test_language(self, store):
        store.update_language("ms")
        assert store.get_language() == "ms"
        with pytest.raises(ValidationError):
            store.update_language("de")
        assert store.get_language() == "ms"

    def test_categories_sanitized_and_deduplicated(self, store):
        store.update_categories(["Food", " Pets! ", "Food", "Rent<>"])
        assert store.get_categories() == ["Food", "Pets!", "Rent"]

    def test_empty_categories_rejected(self, store):
        with pytest.raises(ValidationError):
            store.update_categories(["@@@"])
        assert store.get_categories() == list(DEFAULT_CATEGORIES)

    def test_opening_and_manual_balances(self, store):
        store.update_opening_balance(1000)
        store.update_use_manual_balances(True)
        store.update_manual_balances({"Rent": -1200, "Income": 5000})

        config = store.get_config()
        assert config.opening_balance == 1000
        assert config.use_manual_balances is True
        assert config.manual_balances == {"Rent": -1200.0, "Income": 5000.0}

    def test_returned_config_is_a_copy(self, store):
        store.update_manual_balances({"Rent": -10})
        balances = store.get_manual_balances()
        balances["Rent"] = 999
        assert store.get_manual_balances() == {"Rent": -10.0}


class TestTransactions:
    """Transaction CRUD."""

    def test_add_and_get_round_trip(self, store, make_transaction):
        txn = make_transaction(
            currency="eur",
            from_party="Me",
            to_party="Shop",
            method="Card",
            note="Weekly shop",
        )
        txn_id = store.add_transaction(txn)
        stored = store.get_transaction(txn_id)

        assert stored == replace(txn, id=txn_id)

    def test_sequence_ids(self, store, make_transaction):
        """Expenses get BAU- IDs and gains RES- IDs from separate counters."""
        first = store.add_transaction(make_transaction(amount=-1))
        gain = store.add_transaction(make_transaction(amount=5, category="Income"))
        second = store.add_transaction(make_transaction(amount=-2))

        assert (first, gain, second) == ("BAU-0001", "RES-0001", "BAU-0002")
        config = store.get_config()
        assert config.voucher_counter == 2
        assert config.receipt_counter == 1

    def test_explicit_id_is_kept(self, store, make_transaction):
        assert store.add_transaction(make_transaction(id="manual-1")) == "manual-1"
        with pytest.raises(ValidationError):
            store.add_transaction(make_transaction(id="manual-1"))

    def test_defaults_filled_in(self, store, make_transaction):
        store.update_currency("myr")
        txn_id = store.add_transaction(make_transaction(currency="", date=None))
        stored = store.get_transaction(txn_id)
        assert stored.currency == "myr"
        assert stored.date is not None
        assert stored.date.tzinfo is not None

    def test_text_is_sanitized(self, store, make_transaction):
        txn_id = store.add_transaction(make_transaction(description="Pizza <night>"))
        assert store.get_transaction(txn_id).description == "Pizza night"

    def test_invalid_transaction_rejected(self, store, make_transaction):
        with pytest.raises(ValidationError):
            store.add_transaction(make_transaction(amount=0))
        assert store.get_all_transactions() == []

    def test_newest_first(self, store, make_transaction):
        for day in (3, 1, 2):
            store.add_transaction(make_transaction(date=datetime(2024, 5, day, tzinfo=UTC)))
        dates = [t.date.day for t in store.get_all_transactions()]
        assert dates == [3, 2, 1]

    def test_add_transactions(self, store, make_transaction):
        ids = store.add_transactions(
            [make_transaction(amount=-1), make_transaction(amount=2, category="Income")]
        )
        assert ids == ["BAU-0001", "RES-0001"]

    def test_update_transaction(self, store, make_transaction):
        txn_id = store.add_transaction(make_transaction())
        store.update_transaction(
            txn_id, make_transaction(description="Dinner", amount=-60, currency="usd")
        )
        stored = store.get_transaction(txn_id)
        assert stored.description == "Dinner"
        assert stored.amount == -60
        assert stored.id == txn_id

    def test_naive_dates_stored_as_utc(self, store, make_transaction):
        """Naive dates are taken as UTC and sort alongside aware ones."""
        first = store.add_transaction(make_transaction())
        second = store.add_transaction(make_transaction(date=datetime(2024, 3, 11)))
        store.update_transaction(
            second, make_transaction(date=datetime(2024, 3, 12, 8, 30), currency="usd")
        )
        third = store.add_transaction(make_transaction(date=datetime(2024, 3, 9, tzinfo=UTC)))

        assert store.get_transaction(second).date == datetime(2024, 3, 12, 8, 30, tzinfo=UTC)
        assert [t.id for t in store.get_all_transactions()] == [second, first, third]

    def test_update_missing(self, store, make_transaction):
        with pytest.raises(NotFoundError):
            store.update_transaction("BAU-9999", make_transaction())

    def test_get_missing(self, store):
        with pytest.raises(NotFoundError, match="BAU-9999"):
            store.get_transaction("BAU-9999")

    def test_remove_transaction(self, store, make_transaction):
        txn_id = store.add_transaction(make_transaction())
        store.remove_transaction(txn_id)
        assert store.get_all_transactions() == []
        with pytest.raises(NotFoundError):
            store.remove_transaction(txn_id)

    def test_remove_transactions_ignores_unknown(self, store, make_transaction):
        keep = store.add_transaction(make_transaction(amount=-1))
        drop = store.add_transaction(make_transaction(amount=-2))
        store.remove_transactions([drop, "BAU-9999"])
        assert [t.id for t in store.get_all_transactions()] == [keep]

    def test_returned_lists_are_copies(self, store, make_transaction):
        store.add_transaction(make_transaction())
        listing = store.get_all_transactions()
        listing.clear()
        assert len(store.get_all_transactions()) == 1


class TestRecurringTemplates:
    """Recurring template lifecycle."""

    def test_add_generates_instances(self, store, make_template):
        template_id = store.add_recurring_template(make_template(occurrences=3))

        stored = store.get_recurring_template(template_id)
        assert stored.id == template_id
        assert stored.currency == "usd"
        assert [t.id for t in store.get_recurring_templates()] == [template_id]

        instances = _instances(store, template_id)
        assert [t.date.month for t in instances] == [1, 2, 3]
        assert {t.id for t in instances} == {"BAU-0001", "BAU-0002", "BAU-0003"}

    def test_invalid_template_rejected(self, store, make_template):
        with pytest.raises(ValidationError):
            store.add_recurring_template(make_template(interval="hourly"))
        assert store.get_recurring_templates() == []
        assert store.get_all_transactions() == []

    def test_update_all_regenerates_everything(self, store, make_template):
        template_id = store.add_recurring_template(make_template(occurrences=3))
        now = datetime(2024, 2, 15, tzinfo=UTC)

        store.update_recurring_template(
            template_id, make_template(amount=-1500.0, occurrences=4), update_all=True, now=now
        )

        instances = _instances(store, template_id)
        assert [t.date.month for t in instances] == [1, 2, 3, 4]
        assert {t.amount for t in instances} == {-1500.0}
        assert store.get_recurring_template(template_id).amount == -1500.0

    def test_update_future_keeps_past(self, store, make_template):
        template_id = store.add_recurring_template(make_template(occurrences=4))
        now = datetime(2024, 2, 15, tzinfo=UTC)

        store.update_recurring_template(
            template_id, make_template(amount=-1500.0, occurrences=4), update_all=False, now=now
        )

        instances = _instances(store, template_id)
        assert [(t.date.month, t.amount) for t in instances] == [
            (1, -1200.0),
            (2, -1200.0),
            (3, -1500.0),
            (4, -1500.0),
        ]

    def test_update_missing_template(self, store, make_template):
        with pytest.raises(NotFoundError):
            store.update_recurring_template("nope", make_template(), update_all=True)

    def test_remove_all(self, store, make_template, make_transaction):
        other = store.add_transaction(make_transaction())
        template_id = store.add_recurring_template(make_template(occurrences=3))

        store.remove_recurring_template(template_id, remove_all=True)

        assert store.get_recurring_templates() == []
        assert [t.id for t in store.get_all_transactions()] == [other]

    def test_remove_future_only(self, store, make_template):
        template_id = store.add_recurring_template(make_template(occurrences=4))
        now = datetime(2024, 2, 15, tzinfo=UTC)

        store.remove_recurring_template(template_id, remove_all=False, now=now)

        assert store.get_recurring_templates() == []
        assert [t.date.month for t in _instances(store, template_id)] == [1, 2]

    def test_naive_start_date_stored_as_utc(self, store, make_template):
        template_id = store.add_recurring_template(
            make_template(start_date=datetime(2024, 1, 1), occurrences=3)
        )
        assert store.get_recurring_template(template_id).start_date == datetime(
            2024, 1, 1, tzinfo=UTC
        )

        store.remove_recurring_template(
            template_id, remove_all=False, now=datetime(2024, 2, 15, tzinfo=UTC)
        )
        assert [t.date.month for t in _instances(store, template_id)] == [1, 2]

    def test_remove_missing_template(self, store):
        with pytest.raises(NotFoundError):
            store.remove_recurring_template("nope", remove_all=True)
