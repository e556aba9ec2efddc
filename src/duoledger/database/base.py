"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from duoledger.domain.entities import (
    AuditAction,
    AuditEntry,
    Transaction,
    TransactionDraft,
)


class LedgerStore(ABC):
    """Abstract storage interface for duoledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def list_all(self) -> list[Transaction]:
        """List every transaction in insertion order."""
        pass

    @abstractmethod
    def get(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def insert(self, draft: TransactionDraft) -> int:
        """Insert a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def insert_many(self, drafts: list[TransactionDraft]) -> list[int]:
        """Insert several transactions in one database transaction.

        Either every draft is stored or none is; the store error is re-raised
        after rollback. Returns the IDs in draft order.
        """
        pass

    @abstractmethod
    def update(self, transaction_id: int, draft: TransactionDraft, modified_by: Optional[str] = None) -> None:
        """Replace every editable field of a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        pass

    @abstractmethod
    def delete(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        pass

    # Audit operations
    @abstractmethod
    def add_audit_entry(
        self,
        username: str,
        action: AuditAction,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> int:
        """Append an audit entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_audit_entries(
        self,
        username: Optional[str] = None,
        action: Optional[AuditAction] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = 100,
        ignore_case: bool = False,
    ) -> list[AuditEntry]:
        """List audit entries, newest first.

        Args:
            username: Optional username filter
            action: Optional action filter
            start: Optional inclusive lower bound on timestamp
            end: Optional inclusive upper bound on timestamp
            limit: Maximum number of entries, or None for all
            ignore_case: Match username case-insensitively
        """
        pass
