"""SQLAlchemy models for the duoledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Transaction(Base):
    """Ledger row.

    ``category`` holds the source label ("Te Hyra", "Shpenzime", "Transfere");
    ``marker`` holds the reporting flag resolved from ``sub_category`` when the
    row was written.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    txn_date = Column(Date, nullable=False)
    account = Column(String, nullable=False)
    category = Column(String, nullable=False)
    sub_category = Column(String, nullable=False)
    party = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    marker = Column(String, nullable=False, default="none")
    notes = Column(String(500), nullable=True)
    description = Column(String(500), nullable=True)
    created_by = Column(String, nullable=True)
    modified_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_transactions_txn_date", "txn_date"),)


class AuditLog(Base):
    """Append-only audit trail entry."""

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    username = Column(String, nullable=False)
    action = Column(String, nullable=False)
    entity_type = Column(String, nullable=True)
    entity_id = Column(Integer, nullable=True)
    details = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_audit_log_timestamp", "timestamp"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
