"""Domain model entities for duoledger.

These are pure data classes representing business concepts, independent of
database schema. Reports are built from these values only, so the aggregation
code never touches ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from duoledger.domain.errors import ValidationError


class TransactionKind(Enum):
    """Closed set of transaction categories.

    Values are the labels used on the ledger sheets and in CSV files.
    """

    INCOME = "Te Hyra"
    EXPENSE = "Shpenzime"
    TRANSFER = "Transfere"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, value: Any) -> Optional["TransactionKind"]:
        """Resolve a source label or English name, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        for kind in cls:
            if text == kind.value or text.lower() == kind.name.lower():
                return kind
        return None


class SubCategoryMarker(Enum):
    """Reporting flag resolved from the sub-category when a row is normalised."""

    NONE = "none"
    SHARED = "shared"
    POS = "pos"


class Role(Enum):
    """Role carried by the acting user."""

    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


@dataclass(frozen=True)
class ActorContext:
    """The user performing an operation."""

    name: str
    role: Role = Role.VIEWER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class PartyPair:
    """The two tracked parties.

    Transfer mirroring and the balance sheets are defined over exactly two
    parties, so the pair is validated on construction.
    """

    first: str
    second: str

    def __post_init__(self) -> None:
        if not self.first or not self.second:
            raise ValidationError("Both tracked parties must be named")
        if self.first == self.second:
            raise ValidationError(f"Tracked parties must differ, got '{self.first}' twice")

    def __contains__(self, party: object) -> bool:
        return party == self.first or party == self.second

    def __iter__(self):
        return iter((self.first, self.second))

    def as_tuple(self) -> tuple[str, str]:
        return (self.first, self.second)

    def other(self, party: str) -> str:
        """Return the counterpart of a tracked party."""
        if party == self.first:
            return self.second
        if party == self.second:
            return self.first
        raise ValueError(f"'{party}' is not a tracked party")


@dataclass(frozen=True)
class TransactionDraft:
    """Transaction fields before the store assigns an ID."""

    date: date
    account: str
    kind: TransactionKind
    sub_category: str
    party: str
    amount: Decimal
    marker: SubCategoryMarker = SubCategoryMarker.NONE
    notes: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    date: date
    account: str
    kind: TransactionKind
    sub_category: str
    party: str
    amount: Decimal
    marker: SubCategoryMarker = SubCategoryMarker.NONE
    notes: Optional[str] = None
    description: Optional[str] = None
    created_by: Optional[str] = None
    modified_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_shared(self) -> bool:
        return self.marker is SubCategoryMarker.SHARED

    @property
    def category_label(self) -> str:
        """Source label of the category, or the raw value if it is unknown."""
        if isinstance(self.kind, TransactionKind):
            return self.kind.label
        return str(self.kind)

    @property
    def is_pos(self) -> bool:
        return self.marker is SubCategoryMarker.POS

    @property
    def is_incoming_transfer(self) -> bool:
        """True for the negative leg written as the mirror of a transfer."""
        return self.kind is TransactionKind.TRANSFER and self.amount < 0

    def to_draft(self) -> TransactionDraft:
        """Return the editable fields of this transaction."""
        return TransactionDraft(
            date=self.date,
            account=self.account,
            kind=self.kind,
            sub_category=self.sub_category,
            party=self.party,
            amount=self.amount,
            marker=self.marker,
            notes=self.notes,
            description=self.description,
            created_by=self.created_by,
        )


@dataclass(frozen=True)
class PartyMonthCells:
    """Per-party cells of one monthly matrix row."""

    party: str
    income_shared: Decimal = Decimal("0")
    expense_shared: Decimal = Decimal("0")
    transfer: Decimal = Decimal("0")
    income_other: Decimal = Decimal("0")
    expense_other: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass(frozen=True)
class MonthlyStat:
    """One (year, month) row of the monthly matrix.

    ``month_index`` is zero-based (January is 0).
    """

    year: int
    month_index: int
    label: str
    parties: tuple[PartyMonthCells, PartyMonthCells]
    pos: Decimal
    grand_total: Decimal

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month_index)

    def for_party(self, party: str) -> PartyMonthCells:
        for cells in self.parties:
            if cells.party == party:
                return cells
        raise KeyError(party)


@dataclass(frozen=True)
class MonthlyTotals:
    """Column-wise sums over a set of monthly rows."""

    parties: tuple[PartyMonthCells, PartyMonthCells]
    pos: Decimal
    grand_total: Decimal

    def for_party(self, party: str) -> PartyMonthCells:
        for cells in self.parties:
            if cells.party == party:
                return cells
        raise KeyError(party)


@dataclass(frozen=True)
class YearSection:
    """Monthly rows of one calendar year with their own totals."""

    year: int
    rows: tuple[MonthlyStat, ...]
    totals: MonthlyTotals


@dataclass(frozen=True)
class MonthlyReport:
    """Monthly matrix: ascending rows plus year sections, newest year first."""

    parties: PartyPair
    rows: tuple[MonthlyStat, ...]
    totals: MonthlyTotals
    year_sections: tuple[YearSection, ...]


@dataclass(frozen=True)
class BalancePoint:
    """Cumulative income minus expense at the end of a date."""

    date: date
    balance: Decimal


@dataclass(frozen=True)
class PartyBalance:
    """Balance sheet for one tracked party."""

    party: str
    income: Decimal
    expenses: Decimal
    transfers_out: Decimal
    transfers_in: Decimal
    transaction_count: int
    balance: Decimal


@dataclass(frozen=True)
class DashboardMetrics:
    """Headline figures for the dashboard."""

    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    avg_transaction: Decimal
    trend: Decimal


@dataclass(frozen=True)
class CategoryAmount:
    """Total amount for one sub-category."""

    name: str
    amount: Decimal


@dataclass(frozen=True)
class MonthComparison:
    """Income against expense for one month."""

    year: int
    month_index: int
    label: str
    income: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class TransactionFilter:
    """Optional predicates for the filter view; unset fields match everything."""

    account: Optional[str] = None
    kind: Optional[TransactionKind] = None
    sub_category: Optional[str] = None
    party: Optional[str] = None
    amount: Optional[Decimal] = None
    month: Optional[int] = None
    year: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


@dataclass(frozen=True)
class FilteredSummary:
    """Flat totals over a filtered subset."""

    income: Decimal
    expenses: Decimal
    transfers: Decimal
    total: Decimal
    count: int


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values available for the filter view."""

    accounts: tuple[str, ...]
    kinds: tuple[TransactionKind, ...]
    sub_categories: tuple[str, ...]
    parties: tuple[str, ...]
    years: tuple[int, ...]


@dataclass(frozen=True)
class ImportRowError:
    """Rejected import row with every reason found."""

    row_index: int
    reasons: tuple[str, ...]

    def __str__(self) -> str:
        return f"Row {self.row_index}: {'; '.join(self.reasons)}"


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a bulk import."""

    success: int
    failed: int
    errors: tuple[ImportRowError, ...] = ()
    created_ids: tuple[int, ...] = ()


class AuditAction(Enum):
    """Actions recorded in the audit trail."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    IMPORT = "IMPORT"
    VIEW = "VIEW"


@dataclass(frozen=True)
class AuditEvent:
    """Event emitted after a mutation."""

    actor: str
    action: AuditAction
    entity_type: Optional[str] = "TRANSACTION"
    entity_id: Optional[int] = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuditEntry:
    """Persisted audit trail entry."""

    id: int
    username: str
    action: AuditAction
    entity_type: Optional[str]
    entity_id: Optional[int]
    details: Optional[dict[str, Any]]
    timestamp: datetime


@dataclass(frozen=True)
class UserActivity:
    """Audit statistics for one user over a recent window."""

    username: str
    days: int
    counts: dict[AuditAction, int]
    total: int
    last_login: Optional[datetime]
    last_logout: Optional[datetime]
    recent: tuple[AuditEntry, ...]
