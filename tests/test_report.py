"""Tests for report, dashboard, filter and audit commands."""

import csv
from datetime import date
from decimal import Decimal

import pytest
from duoledger.cli.main import cli

pytestmark = pytest.mark.usefixtures("cli_env")


@pytest.fixture
def seeded(transaction_service, admin):
    """The January 2025 example plus a December 2024 POS expense."""
    create = transaction_service.create_transaction
    create(admin, date(2025, 1, 2), "Bank", "Te Hyra", "GINGER", "Burimi", Decimal("1500"))
    create(admin, date(2025, 1, 2), "Cash", "Transfere", "Transfere", "Burimi", Decimal("500"))
    create(admin, date(2025, 1, 2), "Bank", "Shpenzime", "Rroga", "Skenderi", Decimal("300"))
    create(admin, date(2024, 12, 5), "POS", "Shpenzime", "POS", "Burimi", Decimal("40"))


def _run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_monthly_report(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "report", "monthly")

    assert result.exit_code == 0
    assert "Monthly Report" in result.output
    lines = result.output.splitlines()
    january = next(line for line in lines if line.startswith("Jan-25"))
    december = next(line for line in lines if line.startswith("Dec-24"))
    assert lines.index(december) < lines.index(january)
    assert january.split()[-1] == "1,200.00"
    assert december.split()[-2] == "40.00"


def test_monthly_report_by_year(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "report", "monthly", "--by-year")

    assert result.exit_code == 0
    assert result.output.index("2025") < result.output.index("\n2024")


def test_monthly_report_empty(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "report", "monthly")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_dashboard_balances(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "dashboard", "balances")

    assert result.exit_code == 0
    burimi = next(line for line in result.output.splitlines() if line.startswith("Burimi"))
    skenderi = next(line for line in result.output.splitlines() if line.startswith("Skenderi"))
    assert burimi.split()[-1] == "960.00"
    assert skenderi.split()[-1] == "200.00"


def test_dashboard_cashflow(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "dashboard", "cashflow")

    assert result.exit_code == 0
    assert "2024-12-05" in result.output
    assert "1,160.00" in result.output


def test_dashboard_metrics(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "dashboard", "metrics")

    assert result.exit_code == 0
    assert "Total income" in result.output
    assert "1,500.00" in result.output
    assert "Recent Activity" in result.output


def test_dashboard_expenses(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "dashboard", "expenses", "--limit", "1")

    assert result.exit_code == 0
    assert "Rroga" in result.output
    assert "POS" not in result.output.split("Top Expenses", 1)[1]


def test_filter_summary(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "filter", "--category", "Expense", "--year", "2025")

    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output
    total = next(line for line in result.output.splitlines() if line.startswith("Total"))
    assert total.split()[-1] == "-300.00"


def test_filter_unknown_category(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "filter", "--category", "Bonus")

    assert result.exit_code == 1
    assert 'category "Bonus" is invalid' in result.output


def test_filter_export(cli_runner, temp_db, seeded, tmp_path):
    export_path = tmp_path / "out.csv"

    result = _run(cli_runner, temp_db, "filter", "--name", "Burimi", "--export", str(export_path))

    assert result.exit_code == 0
    assert "Exported 3 transaction(s)" in result.output
    with open(export_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][:2] == ["Date", "Name"]
    assert len(rows) == 4
    assert all(row[1] == "Burimi" for row in rows[1:])


def test_filter_options(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "filter", "--options")

    assert result.exit_code == 0
    assert "Years: 2025, 2024" in result.output
    assert "Names: Burimi, Skenderi" in result.output


def test_audit_list_and_activity(cli_runner, temp_db, seeded):
    result = _run(cli_runner, temp_db, "audit", "list", "--action", "create")

    assert result.exit_code == 0
    assert "Found 4 audit entries" in result.output

    result = _run(cli_runner, temp_db, "audit", "activity", "ADMIN")
    assert result.exit_code == 0
    assert "CREATE" in result.output
    total = next(line for line in result.output.splitlines() if "TOTAL" in line)
    assert total.split()[-1] == "4"
