"""Audit trail: sinks that record mutations and queries over the trail."""

from collections import Counter
from datetime import datetime, timedelta, UTC
from typing import Optional, Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError

from duoledger.database.base import LedgerStore
from duoledger.domain.entities import AuditAction, AuditEntry, AuditEvent, UserActivity

logger = structlog.get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 20


class AuditSink(Protocol):
    """Write-only destination for audit events."""

    def record(self, event: AuditEvent) -> None:
        ...


class LogAuditSink:
    """Audit sink that only writes to the structured log."""

    def record(self, event: AuditEvent) -> None:
        logger.info(
            "audit",
            actor=event.actor,
            action=event.action.value,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
        )


class StoreAuditSink(LogAuditSink):
    """Audit sink that persists events in the ledger store.

    A failure to persist is logged and does not undo or fail the mutation
    that produced the event.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def record(self, event: AuditEvent) -> None:
        super().record(event)
        try:
            self.store.add_audit_entry(
                username=event.actor,
                action=event.action,
                entity_type=event.entity_type,
                entity_id=event.entity_id,
                details=event.details or None,
            )
        except SQLAlchemyError:
            logger.exception("audit_write_failed", actor=event.actor, action=event.action.value)


class AuditService:
    """Read access to the persisted audit trail."""

    def __init__(self, store: LedgerStore):
        """Initialize audit service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def list_entries(
        self,
        username: Optional[str] = None,
        action: Optional[AuditAction] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = 100,
    ) -> list[AuditEntry]:
        """List audit entries with optional filters, newest first."""
        return self.store.list_audit_entries(
            username=username, action=action, start=start, end=end, limit=limit
        )

    def user_activity(self, username: str, days: int = 30, now: Optional[datetime] = None) -> UserActivity:
        """Summarise one user's actions over the last ``days`` days.

        The username is matched case-insensitively.
        """
        if now is None:
            now = datetime.now(UTC)
        entries = self.store.list_audit_entries(
            username=username,
            start=now - timedelta(days=days),
            limit=None,
            ignore_case=True,
        )

        counts = Counter(entry.action for entry in entries)
        last_login = next((e.timestamp for e in entries if e.action is AuditAction.LOGIN), None)
        last_logout = next((e.timestamp for e in entries if e.action is AuditAction.LOGOUT), None)

        return UserActivity(
            username=username,
            days=days,
            counts={action: counts.get(action, 0) for action in AuditAction},
            total=len(entries),
            last_login=last_login,
            last_logout=last_logout,
            recent=tuple(entries[:RECENT_ACTIVITY_LIMIT]),
        )
