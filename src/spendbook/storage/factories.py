"""Storage factory functions.

Backend selection and connection parameters come from arguments or, when
omitted, from the environment:

- ``SPENDBOOK_STORAGE_TYPE``: ``json`` (default), ``sqlite`` or ``postgres``
- ``SPENDBOOK_STORAGE_URL``: data directory, SQLite file path, or
  ``host:port/dbname`` for PostgreSQL
- ``SPENDBOOK_STORAGE_USER`` / ``SPENDBOOK_STORAGE_PASS``: PostgreSQL credentials
- ``SPENDBOOK_STORAGE_SSL``: PostgreSQL SSL mode (default ``disable``)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from spendbook.storage.base import Storage
from spendbook.storage.json_store import JSONStore
from spendbook.storage.sqlalchemy_store import SQLAlchemyStore

logger = logging.getLogger(__name__)

BACKEND_TYPES = ("json", "sqlite", "postgres")
SSL_MODES = ("disable", "require", "verify-ca", "verify-full")

DEFAULT_URLS = {
    "json": "data",
    "sqlite": "spendbook.db",
    "postgres": "localhost:5432/spendbook",
}


@dataclass(frozen=True)
class StorageSettings:
    """Validated backend settings."""

    storage_type: str
    url: str
    user: str = ""
    password: str = ""
    ssl_mode: str = "disable"

    def database_url(self) -> str:
        """SQLAlchemy URL for the relational backends."""
        if self.storage_type == "sqlite":
            return f"sqlite:///{self.url}"
        credentials = ""
        if self.user:
            credentials = quote(self.user, safe="")
            if self.password:
                credentials += ":" + quote(self.password, safe="")
            credentials += "@"
        return f"postgresql+psycopg://{credentials}{self.url}?sslmode={self.ssl_mode}"


def load_settings(
    storage_type: Optional[str] = None,
    url: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    ssl_mode: Optional[str] = None,
) -> StorageSettings:
    """Resolve storage settings from arguments, then environment, then defaults.

    Unknown backend types fall back to ``json`` and unknown SSL modes to
    ``disable``, with a warning.
    """
    env = os.environ
    storage_type = (storage_type or env.get("SPENDBOOK_STORAGE_TYPE") or "json").lower()
    if storage_type not in BACKEND_TYPES:
        logger.warning("Unknown storage type '%s', using json", storage_type)
        storage_type = "json"

    ssl_mode = ssl_mode or env.get("SPENDBOOK_STORAGE_SSL") or "disable"
    if ssl_mode not in SSL_MODES:
        logger.warning("Unknown SSL mode '%s', using disable", ssl_mode)
        ssl_mode = "disable"

    return StorageSettings(
        storage_type=storage_type,
        url=url or env.get("SPENDBOOK_STORAGE_URL") or DEFAULT_URLS[storage_type],
        user=user if user is not None else env.get("SPENDBOOK_STORAGE_USER", ""),
        password=password if password is not None else env.get("SPENDBOOK_STORAGE_PASS", ""),
        ssl_mode=ssl_mode,
    )


def create_storage(settings: Optional[StorageSettings] = None) -> Storage:
    """Create the configured storage backend.

    Args:
        settings: Backend settings. If None, they are loaded from the environment.

    Returns:
        JSONStore or SQLAlchemyStore instance
    """
    settings = settings or load_settings()
    logger.info("Using %s storage at %s", settings.storage_type, settings.url)
    if settings.storage_type == "json":
        return JSONStore(settings.url)
    return SQLAlchemyStore(settings.database_url())
