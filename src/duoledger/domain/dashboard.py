"""Dashboard figures derived from the ledger."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from duoledger.domain.aggregation import ZERO, accepted_transactions, month_key, month_label
from duoledger.domain.entities import (
    CategoryAmount,
    DashboardMetrics,
    MonthComparison,
    Transaction,
    TransactionKind,
)

TREND_WINDOW_DAYS = 30


def dashboard_metrics(transactions: Iterable[Transaction], today: Optional[date] = None) -> DashboardMetrics:
    """Headline totals plus the 30-day income trend.

    The trend compares income over the last 30 days with the 30 days before
    that, as a percentage; it is zero when the earlier window has no income.
    """
    if today is None:
        today = date.today()
    recent_start = today - timedelta(days=TREND_WINDOW_DAYS)
    previous_start = today - timedelta(days=2 * TREND_WINDOW_DAYS)

    total_income = ZERO
    total_expense = ZERO
    recent_income = ZERO
    previous_income = ZERO
    count = 0

    for txn in accepted_transactions(transactions):
        count += 1
        if txn.kind is TransactionKind.INCOME:
            total_income += txn.amount
            if txn.date >= recent_start:
                recent_income += txn.amount
            elif txn.date >= previous_start:
                previous_income += txn.amount
        elif txn.kind is TransactionKind.EXPENSE:
            total_expense += txn.amount

    avg_transaction = (total_income + total_expense) / count if count else ZERO
    trend = ZERO
    if previous_income > 0:
        trend = (recent_income - previous_income) / previous_income * 100

    return DashboardMetrics(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=total_income - total_expense,
        avg_transaction=avg_transaction,
        trend=trend,
    )


def expense_breakdown(
    transactions: Iterable[Transaction], limit: Optional[int] = None
) -> tuple[CategoryAmount, ...]:
    """Expense totals per sub-category, largest first."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in accepted_transactions(transactions):
        if txn.kind is TransactionKind.EXPENSE:
            totals[txn.sub_category] += txn.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return tuple(CategoryAmount(name=name, amount=amount) for name, amount in ranked)


def monthly_comparison(transactions: Iterable[Transaction]) -> tuple[MonthComparison, ...]:
    """Income, expense and net per month, ascending."""
    months: dict[tuple[int, int], dict[str, Decimal]] = {}
    for txn in accepted_transactions(transactions):
        entry = months.setdefault(month_key(txn.date), {"income": ZERO, "expense": ZERO})
        if txn.kind is TransactionKind.INCOME:
            entry["income"] += txn.amount
        elif txn.kind is TransactionKind.EXPENSE:
            entry["expense"] += txn.amount

    return tuple(
        MonthComparison(
            year=year,
            month_index=month_index,
            label=month_label(year, month_index),
            income=months[(year, month_index)]["income"],
            expense=months[(year, month_index)]["expense"],
            net=months[(year, month_index)]["income"] - months[(year, month_index)]["expense"],
        )
        for year, month_index in sorted(months)
    )


def recent_activity(transactions: Iterable[Transaction], limit: int = 5) -> tuple[Transaction, ...]:
    """Most recent transactions by date; ties keep input order."""
    ordered = sorted(transactions, key=lambda txn: txn.date, reverse=True)
    return tuple(ordered[:limit])
