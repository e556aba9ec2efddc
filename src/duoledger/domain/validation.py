"""Normalisation and validation of transaction input."""

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from duoledger.config import Settings
from duoledger.domain.entities import SubCategoryMarker, TransactionDraft, TransactionKind
from duoledger.domain.errors import AggregationInputError, ValidationError, unknown_category, unknown_party
from duoledger.utils.amount_parser import parse_amount
from duoledger.utils.date_parser import parse_import_date

MAX_TEXT_LENGTH = 500
CENT = Decimal("0.01")


def resolve_marker(sub_category: Optional[str], settings: Settings) -> SubCategoryMarker:
    """Resolve the reporting marker for a sub-category label."""
    if sub_category == settings.shared_marker:
        return SubCategoryMarker.SHARED
    if sub_category == settings.pos_marker:
        return SubCategoryMarker.POS
    return SubCategoryMarker.NONE


def _amount_problem(amount: Decimal) -> Optional[str]:
    # Stored as Numeric(12, 2); finer amounts would be rounded on write.
    if amount == 0:
        return "Amount cannot be zero"
    if amount != amount.quantize(CENT):
        return "amount must not have more than 2 decimal places"
    return None


def normalize_kind(value: Any) -> TransactionKind:
    """Resolve a stored category label.

    Raises:
        AggregationInputError: If the label is outside the closed set
    """
    kind = TransactionKind.from_label(value)
    if kind is None:
        raise AggregationInputError(unknown_category(value))
    return kind


def build_draft(
    settings: Settings,
    *,
    date: Optional[date],
    account: Optional[str],
    kind: Any,
    sub_category: Optional[str],
    party: Optional[str],
    amount: Optional[Decimal],
    notes: Optional[str] = None,
    description: Optional[str] = None,
    created_by: Optional[str] = None,
) -> TransactionDraft:
    """Validate single-record input and return a normalised draft.

    Every problem is reported at once, joined with "; ".

    Raises:
        ValidationError: If any field is missing or invalid
    """
    reasons: list[str] = []

    if date is None:
        reasons.append("date is missing")
    if not account or not account.strip():
        reasons.append("account is missing")
    if not party or not party.strip():
        reasons.append("name is missing")

    resolved_kind = TransactionKind.from_label(kind)
    if kind is None or kind == "":
        reasons.append("category is missing")
    elif resolved_kind is None:
        reasons.append(unknown_category(kind))

    if not sub_category or not sub_category.strip():
        reasons.append("subCategory is missing")

    if amount is None:
        reasons.append("amount is missing")
    else:
        problem = _amount_problem(Decimal(amount))
        if problem:
            reasons.append(problem)

    for label, text in (("notes", notes), ("description", description)):
        if text is not None and len(text) > MAX_TEXT_LENGTH:
            reasons.append(f"{label} must be at most {MAX_TEXT_LENGTH} characters")

    if reasons:
        raise ValidationError("; ".join(reasons))

    sub_category = sub_category.strip()
    return TransactionDraft(
        date=date,
        account=account.strip(),
        kind=resolved_kind,
        sub_category=sub_category,
        party=party.strip(),
        amount=Decimal(amount),
        marker=resolve_marker(sub_category, settings),
        notes=notes or None,
        description=description or None,
        created_by=created_by,
    )


def _field(row: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = row.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def validate_import_row(
    row: Mapping[str, Any], settings: Settings, imported_by: Optional[str] = None
) -> tuple[Optional[TransactionDraft], list[str]]:
    """Validate one candidate import row.

    Import is stricter than single-record input: the party must be one of the
    tracked pair and the date must be ISO or DD/MM/YYYY. A missing sub-category
    falls back to the category label.

    Returns:
        (draft, []) on success, (None, reasons) otherwise
    """
    reasons: list[str] = []
    parties = settings.parties.as_tuple()

    txn_date = None
    date_text = _field(row, "date")
    if not date_text:
        reasons.append("date is missing")
    else:
        try:
            txn_date = parse_import_date(date_text)
        except ValueError as e:
            reasons.append(str(e))

    party = _field(row, "name", "party")
    if not party:
        reasons.append("name is missing")
    elif party not in settings.parties:
        reasons.append(unknown_party(party, parties))

    account = _field(row, "account")
    if not account:
        reasons.append("account is missing")

    kind = None
    category_text = _field(row, "category")
    if not category_text:
        reasons.append("category is missing")
    else:
        kind = TransactionKind.from_label(category_text)
        if kind is None:
            reasons.append(unknown_category(category_text))

    amount = None
    amount_text = _field(row, "amount")
    if not amount_text:
        reasons.append("amount is missing")
    else:
        try:
            amount = parse_amount(amount_text)
        except ValueError:
            reasons.append(f'amount "{amount_text}" is not a valid number')
        else:
            problem = _amount_problem(amount)
            if problem:
                reasons.append(problem)

    if reasons:
        return None, reasons

    sub_category = _field(row, "subCategory", "sub_category") or kind.label
    draft = TransactionDraft(
        date=txn_date,
        account=account,
        kind=kind,
        sub_category=sub_category,
        party=party,
        amount=amount,
        marker=resolve_marker(sub_category, settings),
        notes=_field(row, "notes", "note") or None,
        description=_field(row, "description") or None,
        created_by=imported_by,
    )
    return draft, []
