"""Database layer for duoledger."""

from duoledger.database.base import LedgerStore
from duoledger.database.factories import create_sqlite_store

__all__ = ["LedgerStore", "create_sqlite_store"]
