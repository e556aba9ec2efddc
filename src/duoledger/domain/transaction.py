"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from duoledger.config import Settings
from duoledger.database.base import LedgerStore
from duoledger.domain.audit import AuditSink, LogAuditSink
from duoledger.domain.entities import (
    ActorContext,
    AuditAction,
    AuditEvent,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from duoledger.domain.errors import MirrorConsistencyError, NotFoundError, mirror_failed, transaction_not_found
from duoledger.domain.mirroring import expand_transfer
from duoledger.domain.permissions import can_delete, can_edit, require
from duoledger.domain.validation import build_draft

logger = structlog.get_logger(__name__)

AUDITED_FIELDS = ("date", "account", "category", "subCategory", "amount", "name", "notes", "description")


def audit_values(txn: Transaction | TransactionDraft) -> dict[str, Any]:
    """Field values as they appear in audit details."""
    kind = txn.kind.label if isinstance(txn.kind, TransactionKind) else str(txn.kind)
    return {
        "date": txn.date.isoformat(),
        "account": txn.account,
        "category": kind,
        "subCategory": txn.sub_category,
        "amount": f"{txn.amount:.2f}",
        "name": txn.party,
        "notes": txn.notes or "",
        "description": txn.description or "",
    }


def changed_fields(before: dict[str, Any], after: dict[str, Any]) -> list[dict[str, Any]]:
    """List the fields whose value differs, with old and new values."""
    return [
        {"field": name, "from": before[name], "to": after[name]}
        for name in AUDITED_FIELDS
        if before[name] != after[name]
    ]


class TransactionService:
    """Service for recording and editing transactions."""

    def __init__(self, store: LedgerStore, settings: Settings, audit_sink: Optional[AuditSink] = None):
        """Initialize transaction service.

        Args:
            store: Ledger store instance
            settings: Tracked parties and sub-category markers
            audit_sink: Destination for audit events (log only if omitted)
        """
        self.store = store
        self.settings = settings
        self.audit_sink = audit_sink if audit_sink is not None else LogAuditSink()

    def create_transaction(
        self,
        actor: ActorContext,
        date: date,
        account: str,
        category: TransactionKind | str,
        sub_category: str,
        party: str,
        amount: Decimal,
        notes: Optional[str] = None,
        description: Optional[str] = None,
    ) -> list[int]:
        """Create a transaction, mirroring transfers for the other party.

        Args:
            actor: Acting user; must be allowed to edit
            date: Transaction date
            account: Account label
            category: TransactionKind or its label
            sub_category: Sub-category label
            party: Party name
            amount: Signed non-zero amount
            notes: Optional notes
            description: Optional description

        Returns:
            IDs of the stored rows: one, or two for a transfer (original first)

        Raises:
            PermissionDeniedError: If the actor may not edit
            ValidationError: If any field is invalid
            MirrorConsistencyError: If a transfer pair could not be stored
        """
        require(can_edit(actor), actor, "create")
        draft = build_draft(
            self.settings,
            date=date,
            account=account,
            kind=category,
            sub_category=sub_category,
            party=party,
            amount=amount,
            notes=notes,
            description=description,
            created_by=actor.name,
        )
        ids = self.record_draft(draft)

        self.audit_sink.record(
            AuditEvent(
                actor=actor.name,
                action=AuditAction.CREATE,
                entity_id=ids[0],
                details={
                    "amount": f"{draft.amount:.2f}",
                    "category": draft.kind.label,
                    "subCategory": draft.sub_category,
                    "date": draft.date.isoformat(),
                    "mirrorId": ids[1] if len(ids) > 1 else None,
                },
            )
        )
        return ids

    def record_draft(self, draft: TransactionDraft) -> list[int]:
        """Store a validated draft, together with its mirror for transfers.

        Both legs of a transfer go through a single atomic insert, so a failure
        never leaves one leg behind.

        Raises:
            ValidationError: If a transfer names an untracked party
            MirrorConsistencyError: If the transfer pair could not be stored
        """
        legs = expand_transfer(draft, self.settings.parties)
        if len(legs) == 1:
            return [self.store.insert(draft)]

        mirror = legs[1]
        try:
            return self.store.insert_many(legs)
        except SQLAlchemyError as e:
            logger.error(
                "transfer_pair_not_stored",
                party=draft.party,
                counterpart=mirror.party,
                amount=str(draft.amount),
                error=str(e),
            )
            raise MirrorConsistencyError(mirror_failed(draft.party, mirror.party)) from e

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.store.get(transaction_id)

    def update_transaction(
        self,
        actor: ActorContext,
        transaction_id: int,
        date: date,
        account: str,
        category: TransactionKind | str,
        sub_category: str,
        party: str,
        amount: Decimal,
        notes: Optional[str] = None,
        description: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Replace every field of a transaction.

        The counterpart leg of a transfer is not touched.

        Returns:
            The changed fields as recorded in the audit trail

        Raises:
            PermissionDeniedError: If the actor may not edit
            NotFoundError: If the transaction does not exist
            ValidationError: If any field is invalid
        """
        require(can_edit(actor), actor, "update")
        original = self.store.get(transaction_id)
        if original is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        draft = build_draft(
            self.settings,
            date=date,
            account=account,
            kind=category,
            sub_category=sub_category,
            party=party,
            amount=amount,
            notes=notes,
            description=description,
            created_by=original.created_by,
        )
        self.store.update(transaction_id, draft, modified_by=actor.name)

        before = audit_values(original)
        after = audit_values(draft)
        changes = changed_fields(before, after)
        self.audit_sink.record(
            AuditEvent(
                actor=actor.name,
                action=AuditAction.UPDATE,
                entity_id=transaction_id,
                details={
                    "changes": changes,
                    "changesCount": len(changes),
                    "originalValues": before,
                    "newValues": after,
                },
            )
        )
        return changes

    def delete_transaction(self, actor: ActorContext, transaction_id: int) -> None:
        """Delete a transaction.

        The counterpart leg of a transfer is not removed.

        Raises:
            PermissionDeniedError: If the actor may not delete
            NotFoundError: If the transaction doesn't exist
        """
        require(can_delete(actor), actor, "delete")
        txn = self.store.get(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.store.delete(transaction_id)

        values = audit_values(txn)
        self.audit_sink.record(
            AuditEvent(
                actor=actor.name,
                action=AuditAction.DELETE,
                entity_id=transaction_id,
                details={key: values[key] for key in ("amount", "category", "subCategory", "date")},
            )
        )

    def list_transactions(self, include_incoming_transfers: bool = False) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            include_incoming_transfers: If False, hide transfer legs with a
                negative amount (the mirrored side of a transfer)

        Returns:
            List of transaction entities
        """
        transactions = sorted(self.store.list_all(), key=lambda txn: (txn.date, txn.id), reverse=True)
        if include_incoming_transfers:
            return transactions
        return [txn for txn in transactions if not txn.is_incoming_transfer]
