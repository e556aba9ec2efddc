"""Tests for the monthly matrix, running balance and party balance sheets."""

from datetime import date
from decimal import Decimal

import pytest

from duoledger.domain.aggregation import (
    accepted_transactions,
    column_totals,
    month_label,
    monthly_report,
    monthly_stats,
    party_balances,
    running_balance,
)
from duoledger.domain.entities import PartyPair, TransactionKind

INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE
TRANSFER = TransactionKind.TRANSFER


def _mixed_ledger(make_txn):
    return [
        make_txn("2024-12-20", "Burimi", INCOME, 800, sub_category="Rroga"),
        make_txn("2025-02-03", "Skenderi", EXPENSE, 120, sub_category="POS"),
        make_txn("2025-01-15", "Skenderi", INCOME, 400, sub_category="GINGER"),
        make_txn("2025-01-15", "Burimi", EXPENSE, 90, sub_category="GINGER"),
        make_txn("2025-02-10", "Skenderi", TRANSFER, 200, sub_category="Transfere"),
        make_txn("2025-02-10", "Burimi", TRANSFER, -200, sub_category="Transfere"),
        make_txn("2024-11-01", "Burimi", EXPENSE, 60, sub_category="Ushqim"),
        make_txn("2025-02-11", "Guest", EXPENSE, 35, sub_category="POS"),
    ]


class TestMonthlyMatrix:
    """Tests for the per-month, per-party matrix."""

    def test_worked_example(self, worked_example, parties):
        """January 2025 follows the per-party total formula exactly."""
        rows = monthly_stats(worked_example, parties)

        assert len(rows) == 1
        row = rows[0]
        assert row.key == (2025, 0)
        assert row.label == "Jan-25"

        burimi = row.for_party("Burimi")
        assert burimi.income_shared == Decimal("1500")
        assert burimi.transfer == Decimal("500")
        assert burimi.total == Decimal("500")

        skenderi = row.for_party("Skenderi")
        assert skenderi.transfer == Decimal("-500")
        assert skenderi.expense_other == Decimal("300")
        assert skenderi.total == Decimal("700")

        assert row.grand_total == Decimal("1200")
        assert row.pos == Decimal("0")

    def test_rows_sorted_by_year_and_month(self, make_txn, parties):
        """Rows are ordered by (year, month), not by label text."""
        rows = monthly_stats(_mixed_ledger(make_txn), parties)

        assert [row.label for row in rows] == ["Nov-24", "Dec-24", "Jan-25", "Feb-25"]
        assert [row.key for row in rows] == [(2024, 10), (2024, 11), (2025, 0), (2025, 1)]

    def test_shared_marker_routing(self, make_txn, parties):
        """Shared sub-category goes to the shared columns, everything else to other."""
        txns = [
            make_txn("2025-03-01", "Burimi", INCOME, 100, sub_category="GINGER"),
            make_txn("2025-03-01", "Burimi", INCOME, 40, sub_category="Rroga"),
            make_txn("2025-03-02", "Burimi", EXPENSE, 30, sub_category="GINGER"),
            make_txn("2025-03-02", "Burimi", EXPENSE, 10, sub_category="Ushqim"),
        ]
        cells = monthly_stats(txns, parties)[0].for_party("Burimi")

        assert cells.income_shared == Decimal("100")
        assert cells.income_other == Decimal("40")
        assert cells.expense_shared == Decimal("30")
        assert cells.expense_other == Decimal("10")
        assert cells.total == Decimal("100")

    def test_pos_counts_every_party_but_not_grand_total(self, make_txn, parties):
        """POS is summed for any party, tracked or not, and kept out of the grand total."""
        rows = monthly_stats(_mixed_ledger(make_txn), parties)
        february = rows[-1]

        assert february.pos == Decimal("155")
        assert february.grand_total == (
            february.for_party("Burimi").total + february.for_party("Skenderi").total
        )

    def test_untracked_party_not_in_party_cells(self, make_txn, parties):
        """Untracked parties only reach POS."""
        txns = [make_txn("2025-04-01", "Guest", INCOME, 999, sub_category="Rroga")]
        row = monthly_stats(txns, parties)[0]

        assert row.grand_total == Decimal("0")
        assert row.for_party("Burimi").income_other == Decimal("0")
        assert row.for_party("Skenderi").income_other == Decimal("0")

    def test_grand_total_reconciles_with_full_set(self, make_txn, parties):
        """Summed grand totals equal tracked income minus tracked expenses."""
        ledger = _mixed_ledger(make_txn)
        report = monthly_report(ledger, parties)

        income = sum(t.amount for t in ledger if t.party in parties and t.kind is INCOME)
        expenses = sum(t.amount for t in ledger if t.party in parties and t.kind is EXPENSE)
        assert report.totals.grand_total == income - expenses
        assert sum(row.grand_total for row in report.rows) == report.totals.grand_total

    def test_aggregation_is_idempotent(self, make_txn, parties):
        """Two calls over the same ledger give equal reports."""
        ledger = _mixed_ledger(make_txn)
        snapshot = list(ledger)

        first = monthly_report(ledger, parties)
        second = monthly_report(ledger, parties)

        assert first == second
        assert ledger == snapshot

    def test_input_order_does_not_matter(self, make_txn, parties):
        ledger = _mixed_ledger(make_txn)
        assert monthly_report(ledger, parties) == monthly_report(list(reversed(ledger)), parties)

    def test_empty_ledger(self, parties):
        report = monthly_report([], parties)

        assert report.rows == ()
        assert report.year_sections == ()
        assert report.totals.grand_total == Decimal("0")
        assert report.totals.for_party("Burimi").total == Decimal("0")


class TestYearSections:
    """Tests for the per-year partition of the matrix."""

    def test_sections_newest_year_first(self, make_txn, parties):
        """Years are descending while months inside a year stay ascending."""
        report = monthly_report(_mixed_ledger(make_txn), parties)

        assert [section.year for section in report.year_sections] == [2025, 2024]
        assert [row.label for row in report.year_sections[0].rows] == ["Jan-25", "Feb-25"]
        assert [row.label for row in report.year_sections[1].rows] == ["Nov-24", "Dec-24"]

    def test_section_totals_are_column_sums(self, make_txn, parties):
        report = monthly_report(_mixed_ledger(make_txn), parties)

        for section in report.year_sections:
            assert section.totals == column_totals(section.rows, parties)

        assert sum(s.totals.grand_total for s in report.year_sections) == report.totals.grand_total
        assert sum(s.totals.pos for s in report.year_sections) == report.totals.pos


class TestRunningBalance:
    """Tests for the cumulative income/expense series."""

    def test_one_point_per_date_last_value_wins(self, make_txn):
        txns = [
            make_txn("2025-01-02", "Burimi", INCOME, 100),
            make_txn("2025-01-01", "Burimi", INCOME, 50),
            make_txn("2025-01-02", "Skenderi", EXPENSE, 30),
        ]
        points = running_balance(txns)

        assert [(p.date, p.balance) for p in points] == [
            (date(2025, 1, 1), Decimal("50")),
            (date(2025, 1, 2), Decimal("120")),
        ]

    def test_transfers_do_not_produce_points(self, worked_example, make_txn):
        txns = worked_example + [make_txn("2025-02-01", "Burimi", TRANSFER, 70)]
        points = running_balance(txns)

        assert [p.date for p in points] == [date(2025, 1, 2)]
        assert points[-1].balance == Decimal("1200")

    def test_ordering_property(self, make_txn):
        """Dates are strictly ascending and match the qualifying dates."""
        ledger = _mixed_ledger(make_txn)
        points = running_balance(ledger)
        dates = [p.date for p in points]

        assert dates == sorted(dates)
        assert len(dates) == len(set(dates))
        assert set(dates) == {t.date for t in ledger if t.kind in (INCOME, EXPENSE)}

    def test_empty(self):
        assert running_balance([]) == ()


class TestPartyBalances:
    """Tests for the two-pass balance sheet."""

    def test_worked_example_balances(self, worked_example, parties):
        burimi, skenderi = party_balances(worked_example, parties)

        assert burimi.party == "Burimi"
        assert burimi.income == Decimal("1500")
        assert burimi.transfers_out == Decimal("500")
        assert burimi.transfers_in == Decimal("0")
        assert burimi.transaction_count == 2
        assert burimi.balance == Decimal("1000")

        assert skenderi.party == "Skenderi"
        assert skenderi.expenses == Decimal("300")
        assert skenderi.transfers_out == Decimal("0")
        assert skenderi.transfers_in == Decimal("500")
        assert skenderi.transaction_count == 1
        assert skenderi.balance == Decimal("200")

    def test_mirror_leg_is_not_counted_twice(self, worked_example, parties):
        """The receiver is credited from the sender's leg, not its own mirror."""
        with_mirror = party_balances(worked_example, parties)
        without_mirror = party_balances([t for t in worked_example if t.amount > 0], parties)

        assert with_mirror == without_mirror

    def test_symmetry(self, make_txn, parties):
        """Each party's transfers in are the other's transfers out."""
        first, second = party_balances(_mixed_ledger(make_txn), parties)

        assert first.transfers_in == second.transfers_out
        assert second.transfers_in == first.transfers_out

    def test_sum_of_balances_ignores_transfers(self, make_txn, parties):
        ledger = _mixed_ledger(make_txn)
        first, second = party_balances(ledger, parties)

        income = sum(t.amount for t in ledger if t.party in parties and t.kind is INCOME)
        expenses = sum(t.amount for t in ledger if t.party in parties and t.kind is EXPENSE)
        assert first.balance + second.balance == income - expenses

    def test_empty_ledger_returns_both_parties(self, parties):
        balances = party_balances([], parties)

        assert [b.party for b in balances] == ["Burimi", "Skenderi"]
        assert all(b.balance == Decimal("0") and b.transaction_count == 0 for b in balances)

    def test_pair_order_follows_configuration(self, worked_example):
        swapped = PartyPair("Skenderi", "Burimi")
        first, second = party_balances(worked_example, swapped)

        assert first.party == "Skenderi"
        assert second.party == "Burimi"


class TestUnknownCategory:
    """Rows with an unknown category are skipped, not fatal."""

    def test_row_excluded_from_reports(self, make_txn, parties):
        ledger = [
            make_txn("2025-01-05", "Burimi", INCOME, 100),
            make_txn("2025-01-05", "Burimi", "Bonus", 999),
        ]

        assert len(list(accepted_transactions(ledger))) == 1
        report = monthly_report(ledger, parties)
        assert report.totals.grand_total == Decimal("100")
        assert running_balance(ledger)[-1].balance == Decimal("100")
        assert party_balances(ledger, parties)[0].transaction_count == 1

    def test_english_name_is_normalised(self, make_txn, parties):
        ledger = [make_txn("2025-01-05", "Burimi", "income", 100)]

        accepted = list(accepted_transactions(ledger))
        assert accepted[0].kind is INCOME


@pytest.mark.parametrize(
    "year, month_index, expected",
    [(2025, 0, "Jan-25"), (2024, 11, "Dec-24"), (2009, 5, "Jun-09")],
)
def test_month_label(year, month_index, expected):
    assert month_label(year, month_index) == expected
