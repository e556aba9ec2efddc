"""Shared pytest fixtures for duoledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from duoledger.config import Settings
from duoledger.database.factories import create_sqlite_store
from duoledger.domain.audit import StoreAuditSink
from duoledger.domain.csv_import import CSVImportService
from duoledger.domain.entities import (
    ActorContext,
    PartyPair,
    Role,
    SubCategoryMarker,
    Transaction,
    TransactionKind,
)
from duoledger.domain.reports import ReportService
from duoledger.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary ledger store for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create store
    db = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def parties():
    """The tracked party pair used throughout the tests."""
    return PartyPair("Burimi", "Skenderi")


@pytest.fixture
def settings(parties):
    """Default settings with the sample party pair."""
    return Settings(parties=parties)


@pytest.fixture
def admin():
    return ActorContext(name="admin", role=Role.ADMIN)


@pytest.fixture
def viewer():
    return ActorContext(name="guest", role=Role.VIEWER)


@pytest.fixture
def transaction_service(temp_db, settings):
    """Create a TransactionService that persists audit events."""
    return TransactionService(temp_db, settings, audit_sink=StoreAuditSink(temp_db))


@pytest.fixture
def import_service(transaction_service):
    """Create a CSVImportService on top of the transaction service."""
    return CSVImportService(transaction_service)


@pytest.fixture
def report_service(temp_db, settings):
    """Create a ReportService with a temporary store."""
    return ReportService(temp_db, settings)


@pytest.fixture
def make_txn():
    """Build in-memory Transaction entities for engine tests."""
    counter = {"next_id": 1}

    def _make(
        txn_date,
        party,
        kind,
        amount,
        sub_category="Other",
        account="Bank",
        marker=None,
    ):
        if marker is None:
            marker = {
                "GINGER": SubCategoryMarker.SHARED,
                "POS": SubCategoryMarker.POS,
            }.get(sub_category, SubCategoryMarker.NONE)
        txn = Transaction(
            id=counter["next_id"],
            date=txn_date if isinstance(txn_date, date) else date.fromisoformat(txn_date),
            account=account,
            kind=kind,
            sub_category=sub_category,
            party=party,
            amount=Decimal(str(amount)),
            marker=marker,
        )
        counter["next_id"] += 1
        return txn

    return _make


@pytest.fixture
def worked_example(make_txn):
    """January 2025: shared income, a transfer with its mirror and an expense."""
    return [
        make_txn("2025-01-02", "Burimi", TransactionKind.INCOME, 1500, sub_category="GINGER"),
        make_txn("2025-01-02", "Burimi", TransactionKind.TRANSFER, 500, sub_category="Transfere"),
        make_txn("2025-01-02", "Skenderi", TransactionKind.TRANSFER, -500, sub_category="Transfere"),
        make_txn("2025-01-02", "Skenderi", TransactionKind.EXPENSE, 300, sub_category="Rroga"),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_env(monkeypatch):
    """Clear DUOLEDGER_* variables so CLI tests run with the defaults."""
    for name in (
        "DUOLEDGER_DB_PATH",
        "DUOLEDGER_PARTIES",
        "DUOLEDGER_SHARED_MARKER",
        "DUOLEDGER_POS_MARKER",
        "DUOLEDGER_ACTOR",
        "DUOLEDGER_ROLE",
        "DUOLEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
