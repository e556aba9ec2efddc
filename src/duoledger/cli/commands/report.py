"""Monthly report commands."""

import click
from duoledger.cli.date_filters import resolve_cli_date_range
from duoledger.cli.services import report_service
from duoledger.domain.entities import MonthlyStat, MonthlyTotals, PartyPair, TransactionFilter

CELL_COLUMNS = (
    ("income_shared", "Inc.Sh"),
    ("expense_shared", "Exp.Sh"),
    ("transfer", "Transf"),
    ("income_other", "Inc"),
    ("expense_other", "Exp"),
    ("total", "Total"),
)
AMOUNT_WIDTH = 11


@click.group()
def report_group():
    """Monthly reports."""
    pass


def _header(parties: PartyPair) -> list[str]:
    party_width = AMOUNT_WIDTH * len(CELL_COLUMNS) + len(CELL_COLUMNS) - 1
    names = " ".join(f"{party:^{party_width}}" for party in parties)
    cells = " ".join(f"{title:>{AMOUNT_WIDTH}}" for _, title in CELL_COLUMNS)
    return [
        f"{'':<8} {names} {'':>{AMOUNT_WIDTH}} {'':>{AMOUNT_WIDTH}}",
        f"{'Month':<8} {cells} {cells} {'POS':>{AMOUNT_WIDTH}} {'Grand':>{AMOUNT_WIDTH}}",
    ]


def _row(label: str, row: MonthlyStat | MonthlyTotals, parties: PartyPair) -> str:
    cells = []
    for party in parties:
        party_cells = row.for_party(party)
        cells.extend(f"{getattr(party_cells, name):>{AMOUNT_WIDTH},.2f}" for name, _ in CELL_COLUMNS)
    return (
        f"{label:<8} {' '.join(cells)} "
        f"{row.pos:>{AMOUNT_WIDTH},.2f} {row.grand_total:>{AMOUNT_WIDTH},.2f}"
    )


def _echo_table(rows, totals: MonthlyTotals, parties: PartyPair) -> None:
    header = _header(parties)
    width = len(header[1])
    for line in header:
        click.echo(line)
    click.echo("-" * width)
    for row in rows:
        click.echo(_row(row.label, row, parties))
    click.echo("=" * width)
    click.echo(_row("TOTAL", totals, parties))


@report_group.command("monthly")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--by-year", is_flag=True, help="One table per year, newest year first")
@click.pass_context
def monthly_report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    by_year: bool,
):
    """Show the monthly matrix per party.

    For each month and tracked party the columns are shared-project income and
    expenses, transfers, other income and expenses and the party total. POS is
    summed over all parties and is not part of the grand total.

    Examples:
        duoledger report monthly
        duoledger report monthly --by-year
        duoledger report monthly --this-year
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
    )
    report = report_service(ctx).monthly_report(TransactionFilter(start_date=start, end_date=end))

    if not report.rows:
        click.echo("No transactions found.")
        return

    if by_year:
        for section in report.year_sections:
            click.echo(f"\n{section.year}")
            _echo_table(section.rows, section.totals, report.parties)
    else:
        click.echo("\nMonthly Report")
        _echo_table(report.rows, report.totals, report.parties)


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
