"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the engine only ever sees
frozen domain entities.
"""

import json
from decimal import Decimal

from duoledger.domain import entities as domain
from duoledger.database.models import (
    AuditLog as ORMAuditLog,
    Transaction as ORMTransaction,
)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity.

    An unrecognised category label is passed through as a string so that the
    aggregation engine can log and skip the row instead of failing the load.
    """
    kind = domain.TransactionKind.from_label(orm_transaction.category)
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.txn_date,
        account=orm_transaction.account,
        kind=kind if kind is not None else orm_transaction.category,
        sub_category=orm_transaction.sub_category,
        party=orm_transaction.party,
        amount=Decimal(orm_transaction.amount),
        marker=domain.SubCategoryMarker(orm_transaction.marker),
        notes=orm_transaction.notes,
        description=orm_transaction.description,
        created_by=orm_transaction.created_by,
        modified_by=orm_transaction.modified_by,
        created_at=orm_transaction.created_at,
    )


def apply_draft(orm_transaction: ORMTransaction, draft: domain.TransactionDraft) -> ORMTransaction:
    """Copy every editable field of a draft onto an ORM row."""
    orm_transaction.txn_date = draft.date
    orm_transaction.account = draft.account
    orm_transaction.category = draft.kind.label
    orm_transaction.sub_category = draft.sub_category
    orm_transaction.party = draft.party
    orm_transaction.amount = draft.amount
    orm_transaction.marker = draft.marker.value
    orm_transaction.notes = draft.notes
    orm_transaction.description = draft.description
    return orm_transaction


def draft_to_orm(draft: domain.TransactionDraft) -> ORMTransaction:
    """Build a new ORM row from a draft."""
    orm_transaction = apply_draft(ORMTransaction(), draft)
    orm_transaction.created_by = draft.created_by
    return orm_transaction


def audit_entry_to_domain(orm_entry: ORMAuditLog) -> domain.AuditEntry:
    """Convert SQLAlchemy AuditLog model to domain AuditEntry entity."""
    return domain.AuditEntry(
        id=orm_entry.id,
        username=orm_entry.username,
        action=domain.AuditAction(orm_entry.action),
        entity_type=orm_entry.entity_type,
        entity_id=orm_entry.entity_id,
        details=json.loads(orm_entry.details) if orm_entry.details else None,
        timestamp=orm_entry.timestamp,
    )
