"""Report domain service.

Each call reads the whole ledger from the store and recomputes the requested
view; nothing is cached between calls. The monthly matrix sees both legs of
every transfer; the other views see the listing, where the mirrored incoming
leg is hidden.
"""

from datetime import date
from typing import Optional

from duoledger.config import Settings
from duoledger.database.base import LedgerStore
from duoledger.domain import aggregation, dashboard, filters
from duoledger.domain.entities import (
    BalancePoint,
    CategoryAmount,
    DashboardMetrics,
    FilteredSummary,
    FilterOptions,
    MonthComparison,
    MonthlyReport,
    PartyBalance,
    Transaction,
    TransactionFilter,
    TransactionKind,
)


class ReportService:
    """Service for building report views from the ledger."""

    def __init__(self, store: LedgerStore, settings: Settings):
        """Initialize report service.

        Args:
            store: Ledger store instance
            settings: Tracked parties used by per-party views
        """
        self.store = store
        self.settings = settings

    def _ledger(self, criteria: Optional[TransactionFilter] = None) -> list[Transaction]:
        transactions = self.store.list_all()
        if criteria is None or criteria.is_empty:
            return transactions
        return filters.apply_filter(transactions, criteria)

    def _listing(self, criteria: Optional[TransactionFilter] = None) -> list[Transaction]:
        return filters.listing_view(self._ledger(criteria))

    def monthly_report(self, criteria: Optional[TransactionFilter] = None) -> MonthlyReport:
        """Monthly matrix with year sections."""
        return aggregation.monthly_report(self._ledger(criteria), self.settings.parties)

    def running_balance(self, criteria: Optional[TransactionFilter] = None) -> tuple[BalancePoint, ...]:
        """Cumulative income minus expense per date."""
        return aggregation.running_balance(self._listing(criteria))

    def party_balances(self, criteria: Optional[TransactionFilter] = None) -> tuple[PartyBalance, PartyBalance]:
        """Balance sheets of both tracked parties."""
        return aggregation.party_balances(self._listing(criteria), self.settings.parties)

    def dashboard_metrics(self, today: Optional[date] = None) -> DashboardMetrics:
        """Headline dashboard figures."""
        return dashboard.dashboard_metrics(self._listing(), today=today)

    def expense_breakdown(self, limit: Optional[int] = None) -> tuple[CategoryAmount, ...]:
        """Expense totals per sub-category, largest first."""
        return dashboard.expense_breakdown(self._listing(), limit=limit)

    def monthly_comparison(self) -> tuple[MonthComparison, ...]:
        """Income against expense per month."""
        return dashboard.monthly_comparison(self._listing())

    def recent_activity(self, limit: int = 5) -> tuple[Transaction, ...]:
        """Most recent transactions."""
        return dashboard.recent_activity(self._listing(), limit=limit)

    def filter_transactions(self, criteria: TransactionFilter) -> tuple[list[Transaction], FilteredSummary]:
        """Filtered subset and its flat summary."""
        subset = self._listing(criteria)
        return subset, filters.filtered_summary(subset)

    def filter_options(self, selected_kind: Optional[TransactionKind] = None) -> FilterOptions:
        """Distinct values for the filter fields."""
        return filters.filter_options(self._listing(), selected_kind=selected_kind)

    def export_csv(self, criteria: TransactionFilter) -> str:
        """CSV text of the filtered subset."""
        return filters.export_csv(self._listing(criteria))
