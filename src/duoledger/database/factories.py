"""Database factory functions for creating ledger store instances."""

import os
from typing import Optional

from duoledger.config import default_database_path
from duoledger.database.sqlalchemy_db import SQLAlchemyLedgerStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyLedgerStore:
    """Create a SQLite ledger store.

    Args:
        database_path: Path to SQLite database file. If None, checks DUOLEDGER_DB_PATH
            environment variable, then defaults to ~/.duoledger/duoledger.db

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("DUOLEDGER_DB_PATH")

    if database_path is None:
        database_path = default_database_path()

    return SQLAlchemyLedgerStore(f"sqlite:///{database_path}")
