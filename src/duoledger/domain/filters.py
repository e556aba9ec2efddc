"""Filter view: predicate conjunction, flat summary and CSV export."""

import csv
import io
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from duoledger.domain.aggregation import ZERO, accepted_transactions
from duoledger.domain.entities import (
    FilteredSummary,
    FilterOptions,
    Transaction,
    TransactionFilter,
    TransactionKind,
)

EXPORT_HEADERS = ("Date", "Name", "Account", "Category", "SubCategory", "Amount", "Notes", "Description")


def matches(txn: Transaction, criteria: TransactionFilter) -> bool:
    """Return True if the transaction satisfies every set predicate."""
    if criteria.account is not None and txn.account != criteria.account:
        return False
    if criteria.kind is not None and txn.kind is not criteria.kind:
        return False
    if criteria.sub_category is not None and txn.sub_category != criteria.sub_category:
        return False
    if criteria.party is not None and txn.party != criteria.party:
        return False
    if criteria.amount is not None and txn.amount != criteria.amount:
        return False
    if criteria.month is not None and txn.date.month != criteria.month:
        return False
    if criteria.year is not None and txn.date.year != criteria.year:
        return False
    if criteria.start_date is not None and txn.date < criteria.start_date:
        return False
    if criteria.end_date is not None and txn.date > criteria.end_date:
        return False
    return True


def apply_filter(transactions: Iterable[Transaction], criteria: TransactionFilter) -> list[Transaction]:
    """Return the matching transactions in input order."""
    return [txn for txn in transactions if matches(txn, criteria)]


def listing_view(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Drop the mirrored incoming leg of each transfer, keeping input order."""
    return [txn for txn in transactions if not txn.is_incoming_transfer]


def filtered_summary(transactions: Sequence[Transaction]) -> FilteredSummary:
    """Flat totals over an already filtered subset.

    ``total`` is income minus expenses minus transfers; there is no
    counterpart credit here, unlike the party balance sheet. Rows with an
    unknown category are left out of both the sums and ``count``.
    """
    sums = {kind: ZERO for kind in TransactionKind}
    count = 0
    for txn in accepted_transactions(transactions):
        sums[txn.kind] += txn.amount
        count += 1

    income = sums[TransactionKind.INCOME]
    expenses = sums[TransactionKind.EXPENSE]
    transfers = sums[TransactionKind.TRANSFER]
    return FilteredSummary(
        income=income,
        expenses=expenses,
        transfers=transfers,
        total=income - expenses - transfers,
        count=count,
    )


def filter_options(
    transactions: Sequence[Transaction], selected_kind: Optional[TransactionKind] = None
) -> FilterOptions:
    """Distinct values for each filter field.

    Sub-categories are narrowed to the selected category when one is given.
    Years are newest first, everything else is sorted ascending.
    """
    sub_source = transactions
    if selected_kind is not None:
        sub_source = [txn for txn in transactions if txn.kind is selected_kind]

    kinds = {txn.kind for txn in transactions if isinstance(txn.kind, TransactionKind)}
    return FilterOptions(
        accounts=tuple(sorted({txn.account for txn in transactions})),
        kinds=tuple(sorted(kinds, key=lambda kind: kind.label)),
        sub_categories=tuple(sorted({txn.sub_category for txn in sub_source})),
        parties=tuple(sorted({txn.party for txn in transactions})),
        years=tuple(sorted({txn.date.year for txn in transactions}, reverse=True)),
    )


def _format_amount(amount: Decimal) -> str:
    return format(amount.normalize(), "f") if amount == amount.to_integral() else format(amount, "f")


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as CSV text; every data cell is quoted."""
    buffer = io.StringIO()
    buffer.write(",".join(EXPORT_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for txn in transactions:
        writer.writerow(
            (
                txn.date.isoformat(),
                txn.party,
                txn.account,
                txn.category_label,
                txn.sub_category,
                _format_amount(txn.amount),
                txn.notes or "",
                txn.description or "",
            )
        )
    return buffer.getvalue()
