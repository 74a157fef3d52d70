"""Tests specific to the JSON file store."""

import json
import os
from datetime import datetime, UTC
from decimal import Decimal

import pytest

from spendbook.domain.entities import default_config
from spendbook.domain.errors import PersistenceError
from spendbook.storage.json_store import CONFIG_FILE, TRANSACTIONS_FILE, JSONStore


def test_creates_documents_on_first_open(tmp_path):
    """Opening an empty directory writes default documents."""
    data_dir = tmp_path / "fresh"
    JSONStore(data_dir)

    assert json.loads((data_dir / TRANSACTIONS_FILE).read_text()) == []
    config = json.loads((data_dir / CONFIG_FILE).read_text())
    assert config["currency"] == "usd"
    assert config["startDate"] == 1
    assert config["recurringTransactions"] == []


def test_custom_defaults(tmp_path):
    store = JSONStore(tmp_path, defaults=default_config(currency="eur", start_date=25))
    assert store.get_currency() == "eur"
    assert store.get_start_date() == 25


def test_state_survives_reopen(json_store, make_transaction, make_template):
    """Everything written is read back by a new store on the same directory."""
    txn_id = json_store.add_transaction(make_transaction(note="keep me"))
    template_id = json_store.add_recurring_template(make_template(occurrences=2))
    json_store.update_currency("eur")
    json_store.update_manual_balances({"Rent": -100})

    reopened = JSONStore(json_store.data_dir)

    assert reopened.get_transaction(txn_id).note == "keep me"
    assert reopened.get_recurring_template(template_id).occurrences == 2
    assert len(reopened.get_all_transactions()) == 3
    assert reopened.get_currency() == "eur"
    assert reopened.get_manual_balances() == {"Rent": -100.0}
    assert reopened.get_config().voucher_counter == 3


def test_document_layout(json_store, make_transaction):
    """Transactions are stored with their wire field names."""
    json_store.add_transaction(make_transaction(from_party="Me", to_party="Shop"))

    (item,) = json.loads(json_store.transactions_path.read_text())
    assert item["id"] == "BAU-0001"
    assert item["from"] == "Me"
    assert item["to"] == "Shop"
    assert item["recurringId"] == ""
    assert item["amount"] == -42.5
    assert datetime.fromisoformat(item["date"]) == datetime(2024, 3, 10, 12, tzinfo=UTC)


def test_failed_write_keeps_memory_unchanged(json_store, make_transaction, monkeypatch):
    """A failed file write leaves both the file and memory as they were."""
    json_store.add_transaction(make_transaction())
    before = json_store.transactions_path.read_text()

    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)

    with pytest.raises(PersistenceError) as excinfo:
        json_store.add_transaction(make_transaction(amount=-1))

    assert excinfo.value.operation == "add_transaction"
    monkeypatch.undo()
    assert len(json_store.get_all_transactions()) == 1
    assert json_store.get_config().voucher_counter == 1
    assert json_store.transactions_path.read_text() == before
    assert not [p for p in json_store.data_dir.iterdir() if p.name.endswith(".tmp")]


def test_unserializable_document_is_not_written(json_store):
    """Encoding errors surface as PersistenceError and leave no temp file behind."""
    before = json_store.config_path.read_text()

    with pytest.raises(PersistenceError) as excinfo:
        json_store._write_document(
            json_store.config_path, {"openingBalance": Decimal("10.50")}, "update_opening_balance"
        )

    assert excinfo.value.operation == "update_opening_balance"
    assert json_store.config_path.read_text() == before
    assert not [p for p in json_store.data_dir.iterdir() if p.name.endswith(".tmp")]


def test_failed_config_write(json_store, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(PersistenceError):
        json_store.update_currency("eur")
    monkeypatch.undo()
    assert json_store.get_currency() == "usd"


def test_malformed_document(tmp_path):
    (tmp_path / TRANSACTIONS_FILE).write_text("not json")
    with pytest.raises(PersistenceError):
        JSONStore(tmp_path)


def test_explicit_ids_are_skipped_by_counter(json_store, make_transaction):
    """Generated IDs never collide with IDs that already exist."""
    json_store.add_transaction(make_transaction(id="BAU-0001"))
    assert json_store.add_transaction(make_transaction()) == "BAU-0002"
