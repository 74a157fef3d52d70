"""Shared pytest fixtures for spendbook tests."""

from datetime import datetime, UTC

import pytest

from spendbook.domain.entities import Interval, RecurringTemplate, Transaction
from spendbook.storage.json_store import JSONStore
from spendbook.storage.sqlalchemy_store import SQLAlchemyStore


@pytest.fixture
def json_store(tmp_path):
    """Create a JSON store in a temporary data directory."""
    store = JSONStore(tmp_path / "data")
    yield store
    store.close()


@pytest.fixture
def sqlite_path(tmp_path):
    """Path of a temporary SQLite database file."""
    return tmp_path / "spendbook.db"


@pytest.fixture
def sqlite_store(sqlite_path):
    """Create a relational store backed by a temporary SQLite file."""
    store = SQLAlchemyStore(f"sqlite:///{sqlite_path}")
    yield store
    store.close()


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path):
    """Run a test against both storage backends."""
    if request.param == "json":
        backend = JSONStore(tmp_path / "data")
    else:
        backend = SQLAlchemyStore(f"sqlite:///{tmp_path / 'spendbook.db'}")
    yield backend
    backend.close()


@pytest.fixture
def make_transaction():
    """Build a valid transaction with overridable fields."""

    def _make(**overrides) -> Transaction:
        fields = dict(
            description="Groceries",
            category="Food",
            amount=-42.5,
            date=datetime(2024, 3, 10, 12, 0, tzinfo=UTC),
        )
        fields.update(overrides)
        return Transaction(**fields)

    return _make


@pytest.fixture
def make_template():
    """Build a valid monthly recurring template with overridable fields."""

    def _make(**overrides) -> RecurringTemplate:
        fields = dict(
            description="Rent",
            category="Rent",
            amount=-1200.0,
            start_date=datetime(2024, 1, 1, tzinfo=UTC),
            interval=Interval.MONTHLY.value,
            occurrences=12,
        )
        fields.update(overrides)
        return RecurringTemplate(**fields)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(tmp_path):
    """Global CLI options pointing at a temporary JSON data directory."""
    return ["--storage-type", "json", "--storage-url", str(tmp_path / "cli-data")]
