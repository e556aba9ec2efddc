"""CSV import domain service."""

import csv
from pathlib import Path
from typing import Any, Iterable, Mapping

import structlog
from sqlalchemy.exc import SQLAlchemyError

from duoledger.domain.entities import (
    ActorContext,
    AuditAction,
    AuditEvent,
    ImportResult,
    ImportRowError,
)
from duoledger.domain.errors import DomainError, ValidationError
from duoledger.domain.permissions import can_import, require
from duoledger.domain.transaction import TransactionService
from duoledger.domain.validation import validate_import_row

logger = structlog.get_logger(__name__)

REQUIRED_COLUMNS = ("date", "name", "account", "category", "amount")


class CSVImportService:
    """Service for bulk importing transactions."""

    def __init__(self, transaction_service: TransactionService):
        """Initialize CSV import service.

        Args:
            transaction_service: Service used to store rows (and mirror transfers)
        """
        self.transaction_service = transaction_service
        self.settings = transaction_service.settings
        self.audit_sink = transaction_service.audit_sink

    def read_csv(self, csv_file_path: str) -> list[dict[str, str]]:
        """Read candidate rows from a CSV file.

        Blank lines and rows whose cells are all empty are dropped.

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
            ValidationError: If the header lacks a required column
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                raise ValidationError("CSV file has no columns")

            columns = {name.strip() for name in reader.fieldnames if name}
            has_party = "name" in columns or "party" in columns
            missing = [
                col for col in REQUIRED_COLUMNS
                if col not in columns and not (col == "name" and has_party)
            ]
            if missing:
                raise ValidationError(f"CSV file missing required columns: {', '.join(missing)}")

            rows = []
            for row in reader:
                cleaned = {
                    (key or "").strip(): (value or "").strip()
                    for key, value in row.items()
                    if isinstance(value, str) or value is None
                }
                if any(cleaned.values()):
                    rows.append(cleaned)
        return rows

    def import_csv(self, actor: ActorContext, csv_file_path: str) -> ImportResult:
        """Import transactions from a CSV file.

        Raises:
            PermissionDeniedError: If the actor may not import
            FileNotFoundError: If the CSV file doesn't exist
            ValidationError: If the header is invalid or the file has no rows
        """
        require(can_import(actor), actor, "import")
        return self.import_rows(actor, self.read_csv(csv_file_path))

    def import_rows(
        self, actor: ActorContext, rows: Iterable[Mapping[str, Any]], first_row: int = 2
    ) -> ImportResult:
        """Validate and store candidate rows one by one.

        A rejected row is reported with every reason found and does not stop
        the rows after it. Transfers are mirrored as in single-record entry.

        Args:
            actor: Acting user; must be allowed to import
            rows: Candidate rows keyed by column name
            first_row: Number reported for the first row (the header is row 1)

        Returns:
            ImportResult with success and failure counts and row errors

        Raises:
            PermissionDeniedError: If the actor may not import
            ValidationError: If there are no rows at all
        """
        require(can_import(actor), actor, "import")
        rows = list(rows)
        if not rows:
            raise ValidationError("Invalid data: at least one transaction row is required")

        success = 0
        errors: list[ImportRowError] = []
        created_ids: list[int] = []

        for offset, row in enumerate(rows):
            row_index = first_row + offset
            draft, reasons = validate_import_row(row, self.settings, imported_by=actor.name)
            if draft is None:
                errors.append(ImportRowError(row_index=row_index, reasons=tuple(reasons)))
                continue

            try:
                created_ids.extend(self.transaction_service.record_draft(draft))
            except (DomainError, SQLAlchemyError) as e:
                errors.append(ImportRowError(row_index=row_index, reasons=(str(e),)))
                continue
            success += 1

        result = ImportResult(
            success=success,
            failed=len(errors),
            errors=tuple(errors),
            created_ids=tuple(created_ids),
        )
        logger.info("import_complete", success=result.success, failed=result.failed)

        self.audit_sink.record(
            AuditEvent(
                actor=actor.name,
                action=AuditAction.IMPORT,
                details={
                    "totalRecords": len(rows),
                    "successful": result.success,
                    "failed": result.failed,
                },
            )
        )
        return result
