"""CLI helpers for building services from the click context."""

from __future__ import annotations

import click
from duoledger.domain.audit import StoreAuditSink
from duoledger.domain.csv_import import CSVImportService
from duoledger.domain.reports import ReportService
from duoledger.domain.transaction import TransactionService


def transaction_service(ctx: click.Context) -> TransactionService:
    """Transaction service whose audit events are persisted in the ledger."""
    db = ctx.obj["db"]
    return TransactionService(db, ctx.obj["settings"], audit_sink=StoreAuditSink(db))


def import_service(ctx: click.Context) -> CSVImportService:
    return CSVImportService(transaction_service(ctx))


def report_service(ctx: click.Context) -> ReportService:
    return ReportService(ctx.obj["db"], ctx.obj["settings"])
