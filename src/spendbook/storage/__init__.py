"""Storage layer for spendbook."""

from spendbook.storage.base import Storage
from spendbook.storage.factories import StorageSettings, create_storage, load_settings
from spendbook.storage.json_store import JSONStore
from spendbook.storage.sqlalchemy_store import SQLAlchemyStore

__all__ = [
    "JSONStore",
    "SQLAlchemyStore",
    "Storage",
    "StorageSettings",
    "create_storage",
    "load_settings",
]
