"""SQLAlchemy models for the relational store."""

import logging

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    inspect,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()

CONFIG_ID = "default"


class TransactionRow(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    recurring_id = Column(String(36), nullable=True, index=True)
    description = Column(String(255), nullable=False)
    from_party = Column("from", String(255), nullable=True)
    to_party = Column("to", String(255), nullable=True)
    method = Column(String(50), nullable=True)
    note = Column(Text, nullable=True)
    category = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency = Column(String(3), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)


class RecurringTemplateRow(Base):
    """Recurring template rule model."""

    __tablename__ = "recurring_templates"

    id = Column(String(36), primary_key=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency = Column(String(3), nullable=False)
    from_party = Column("from", String(255), nullable=True)
    to_party = Column("to", String(255), nullable=True)
    method = Column(String(50), nullable=True)
    note = Column(Text, nullable=True)
    category = Column(String(255), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    interval = Column(String(50), nullable=False)
    occurrences = Column(Integer, nullable=False)


class ConfigRow(Base):
    """Single-row configuration model, keyed by ``CONFIG_ID``.

    ``categories`` and ``manual_balances`` hold JSON-encoded values.
    """

    __tablename__ = "config"

    id = Column(String(255), primary_key=True, default=CONFIG_ID)
    categories = Column(Text, nullable=False)
    currency = Column(String(255), nullable=False)
    start_date = Column(Integer, nullable=False)
    language = Column(String(16), nullable=False, default="en", server_default="en")
    voucher_counter = Column(Integer, nullable=False, default=0, server_default="0")
    receipt_counter = Column(Integer, nullable=False, default=0, server_default="0")
    opening_balance = Column(
        Numeric(15, 2, asdecimal=False), nullable=False, default=0, server_default="0"
    )
    use_manual_balances = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    manual_balances = Column(Text, nullable=False, default="{}", server_default="{}")


# Columns added after the first release: (table, column, DDL type and default)
ADDITIVE_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("config", "language", "VARCHAR(16) NOT NULL DEFAULT 'en'"),
    ("config", "voucher_counter", "INTEGER NOT NULL DEFAULT 0"),
    ("config", "receipt_counter", "INTEGER NOT NULL DEFAULT 0"),
    ("config", "opening_balance", "NUMERIC(15, 2) NOT NULL DEFAULT 0"),
    ("config", "use_manual_balances", "BOOLEAN NOT NULL DEFAULT false"),
    ("config", "manual_balances", "TEXT NOT NULL DEFAULT '{}'"),
    ("transactions", "recurring_id", "VARCHAR(36)"),
)


def column_exists(engine: Engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    columns = [col["name"] for col in inspect(engine).get_columns(table_name)]
    return column_name in columns


def initialize_schema(engine: Engine) -> None:
    """Create missing tables and add missing columns. Safe to run repeatedly."""
    Base.metadata.create_all(engine)
    for table_name, column_name, ddl in ADDITIVE_COLUMNS:
        if column_exists(engine, table_name, column_name):
            continue
        logger.info("Adding column %s.%s", table_name, column_name)
        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
