"""Aggregation engine: monthly matrix, running balance and party balance sheets.

Every function here is a pure computation over a snapshot of the ledger. Inputs
are never mutated and no state is kept between calls, so calling a function
twice with the same transactions returns equal results.
"""

from collections import defaultdict
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Sequence

import structlog

from duoledger.domain.entities import (
    BalancePoint,
    MonthlyReport,
    MonthlyStat,
    MonthlyTotals,
    PartyBalance,
    PartyMonthCells,
    PartyPair,
    Transaction,
    TransactionKind,
    YearSection,
)
from duoledger.domain.errors import AggregationInputError
from duoledger.domain.validation import normalize_kind

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_CELL_FIELDS = (
    "income_shared",
    "expense_shared",
    "transfer",
    "income_other",
    "expense_other",
)


def month_label(year: int, month_index: int) -> str:
    """Return the display label for a zero-based month, e.g. ``"Jan-25"``."""
    return f"{MONTH_ABBREVIATIONS[month_index]}-{year % 100:02d}"


def month_key(txn_date: date) -> tuple[int, int]:
    """Return the (year, zero-based month) bucket for a date."""
    return (txn_date.year, txn_date.month - 1)


def accepted_transactions(transactions: Iterable[Transaction]) -> Iterator[Transaction]:
    """Yield transactions whose category is usable by the engine.

    Rows with a category outside the closed set are a data-integrity problem;
    they are logged and left out so that the rest of the report still builds.
    """
    for txn in transactions:
        if isinstance(txn.kind, TransactionKind):
            yield txn
            continue
        try:
            kind = normalize_kind(txn.kind)
        except AggregationInputError as e:
            logger.warning("aggregation_row_excluded", transaction_id=txn.id, reason=str(e))
            continue
        yield replace(txn, kind=kind)


def _route_cell(txn: Transaction) -> str:
    """Return the per-party cell a transaction lands in."""
    if txn.kind is TransactionKind.TRANSFER:
        return "transfer"
    if txn.kind is TransactionKind.INCOME:
        return "income_shared" if txn.is_shared else "income_other"
    return "expense_shared" if txn.is_shared else "expense_other"


def _party_total(own: dict[str, Decimal], other: dict[str, Decimal]) -> Decimal:
    # Own income and the counterpart's outgoing transfers add; own outgoing
    # transfers and own expenses subtract.
    return (
        own["income_shared"]
        + own["income_other"]
        + other["transfer"]
        - own["transfer"]
        - own["expense_shared"]
        - own["expense_other"]
    )


def _freeze_cells(party: str, cells: dict[str, Decimal], total: Decimal) -> PartyMonthCells:
    return PartyMonthCells(party=party, total=total, **{name: cells[name] for name in _CELL_FIELDS})


def monthly_stats(transactions: Iterable[Transaction], parties: PartyPair) -> tuple[MonthlyStat, ...]:
    """Build the monthly matrix rows, ascending by (year, month).

    Args:
        transactions: Full ledger in any order
        parties: The tracked pair; other parties only contribute to POS

    Returns:
        One MonthlyStat per (year, month) present in the ledger
    """
    buckets: dict[tuple[int, int], dict[str, dict[str, Decimal]]] = {}
    pos_totals: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)

    for txn in accepted_transactions(transactions):
        key = month_key(txn.date)
        if key not in buckets:
            buckets[key] = {party: {name: ZERO for name in _CELL_FIELDS} for party in parties}
            pos_totals[key] = ZERO

        if txn.party in parties:
            cells = buckets[key][txn.party]
            cell = _route_cell(txn)
            cells[cell] += txn.amount

        if txn.is_pos:
            pos_totals[key] += txn.amount

    rows = []
    for key in sorted(buckets):
        year, month_index = key
        first = buckets[key][parties.first]
        second = buckets[key][parties.second]
        first_total = _party_total(first, second)
        second_total = _party_total(second, first)
        rows.append(
            MonthlyStat(
                year=year,
                month_index=month_index,
                label=month_label(year, month_index),
                parties=(
                    _freeze_cells(parties.first, first, first_total),
                    _freeze_cells(parties.second, second, second_total),
                ),
                pos=pos_totals[key],
                grand_total=first_total + second_total,
            )
        )
    return tuple(rows)


def column_totals(rows: Sequence[MonthlyStat], parties: PartyPair) -> MonthlyTotals:
    """Sum every column of the given rows."""
    sums = {party: {name: ZERO for name in _CELL_FIELDS + ("total",)} for party in parties}
    pos = ZERO
    grand_total = ZERO

    for row in rows:
        for cells in row.parties:
            party_sums = sums[cells.party]
            for name in party_sums:
                party_sums[name] += getattr(cells, name)
        pos += row.pos
        grand_total += row.grand_total

    return MonthlyTotals(
        parties=tuple(PartyMonthCells(party=party, **sums[party]) for party in parties),
        pos=pos,
        grand_total=grand_total,
    )


def year_sections(rows: Sequence[MonthlyStat], parties: PartyPair) -> tuple[YearSection, ...]:
    """Partition rows by year, newest year first.

    Rows inside a section keep their ascending month order and each section
    is totalled on its own.
    """
    by_year: dict[int, list[MonthlyStat]] = defaultdict(list)
    for row in rows:
        by_year[row.year].append(row)

    return tuple(
        YearSection(year=year, rows=tuple(by_year[year]), totals=column_totals(by_year[year], parties))
        for year in sorted(by_year, reverse=True)
    )


def monthly_report(transactions: Iterable[Transaction], parties: PartyPair) -> MonthlyReport:
    """Build the full monthly matrix with grand totals and year sections."""
    rows = monthly_stats(transactions, parties)
    return MonthlyReport(
        parties=parties,
        rows=rows,
        totals=column_totals(rows, parties),
        year_sections=year_sections(rows, parties),
    )


def running_balance(transactions: Iterable[Transaction]) -> tuple[BalancePoint, ...]:
    """Cumulative income minus expense, one point per date.

    Transfers do not move this series. Transactions sharing a date keep their
    input order, and only the last cumulative value of each date is kept.
    """
    ordered = sorted(accepted_transactions(transactions), key=lambda txn: txn.date)

    points: dict[date, Decimal] = {}
    balance = ZERO
    for txn in ordered:
        if txn.kind is TransactionKind.INCOME:
            balance += txn.amount
        elif txn.kind is TransactionKind.EXPENSE:
            balance -= txn.amount
        else:
            continue
        points[txn.date] = balance

    return tuple(BalancePoint(date=day, balance=value) for day, value in points.items())


def party_balances(
    transactions: Iterable[Transaction], parties: PartyPair
) -> tuple[PartyBalance, PartyBalance]:
    """Balance sheets for both tracked parties, in pair order.

    Built in two passes: the first accumulates each party's own income,
    expenses and outgoing transfers; the second credits each party with the
    counterpart's outgoing transfers. Mirror legs are skipped, since the
    counterpart credit already stands in for them.
    """
    sheets = {
        party: {"income": ZERO, "expenses": ZERO, "transfers_out": ZERO, "count": 0}
        for party in parties
    }

    for txn in accepted_transactions(transactions):
        if txn.party not in parties or txn.is_incoming_transfer:
            continue
        sheet = sheets[txn.party]
        sheet["count"] += 1
        if txn.kind is TransactionKind.INCOME:
            sheet["income"] += txn.amount
        elif txn.kind is TransactionKind.EXPENSE:
            sheet["expenses"] += txn.amount
        else:
            sheet["transfers_out"] += txn.amount

    balances = []
    for party in parties:
        sheet = sheets[party]
        transfers_in = sheets[parties.other(party)]["transfers_out"]
        balances.append(
            PartyBalance(
                party=party,
                income=sheet["income"],
                expenses=sheet["expenses"],
                transfers_out=sheet["transfers_out"],
                transfers_in=transfers_in,
                transaction_count=sheet["count"],
                balance=sheet["income"] - sheet["expenses"] - sheet["transfers_out"] + transfers_in,
            )
        )
    return balances[0], balances[1]
