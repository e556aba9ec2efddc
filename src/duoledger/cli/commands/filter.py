"""Filter command."""

from pathlib import Path

import click
from duoledger.cli.date_filters import resolve_cli_date_range
from duoledger.cli.error_handling import handle_domain_error
from duoledger.cli.services import report_service
from duoledger.domain.entities import TransactionFilter, TransactionKind
from duoledger.domain.errors import unknown_category
from duoledger.utils.amount_parser import parse_amount


@click.command("filter")
@click.option("--account", help="Account label")
@click.option("--category", help="Category: 'Te Hyra', 'Shpenzime', 'Transfere' (or Income, Expense, Transfer)")
@click.option("--sub-category", help="Sub-category")
@click.option("--name", "party", help="Party name")
@click.option("--amount", help="Exact amount")
@click.option("--month", type=click.IntRange(1, 12), help="Calendar month (1-12)")
@click.option("--year", type=int, help="Calendar year")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the matching rows to a CSV file")
@click.option("--options", "show_options", is_flag=True, help="List the values available for each filter")
@click.pass_context
def filter_transactions(
    ctx,
    account: str | None,
    category: str | None,
    sub_category: str | None,
    party: str | None,
    amount: str | None,
    month: int | None,
    year: int | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    export_path: str | None,
    show_options: bool,
):
    """Filter the ledger and summarise the matching transactions.

    All given filters must match. The summary total is income minus expenses
    minus transfers.

    Examples:
        duoledger filter --category Expense --year 2025
        duoledger filter --name Burimi --this-month --export burimi.csv
    """
    service = report_service(ctx)

    kind = None
    if category is not None:
        kind = TransactionKind.from_label(category)
        if kind is None:
            handle_domain_error(ctx, ValueError(unknown_category(category)))

    if show_options:
        _echo_options(service.filter_options(selected_kind=kind))
        return

    exact_amount = None
    if amount is not None:
        try:
            exact_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

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

    criteria = TransactionFilter(
        account=account,
        kind=kind,
        sub_category=sub_category,
        party=party,
        amount=exact_amount,
        month=month,
        year=year,
        start_date=start,
        end_date=end,
    )
    transactions, summary = service.filter_transactions(criteria)

    if export_path:
        Path(export_path).write_text(service.export_csv(criteria), encoding="utf-8")
        click.echo(f"Exported {summary.count} transaction(s) to {export_path}")

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {summary.count} transaction(s):")
    click.echo("-" * 96)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Name':<12} {'Account':<12} {'Category':<12} {'SubCategory':<20} {'Amount':>12}"
    )
    click.echo("-" * 96)
    for txn in transactions:
        amount_str = f"{txn.amount:,.2f}"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.party[:12]:<12} {txn.account[:12]:<12} "
            f"{txn.category_label:<12} {txn.sub_category[:20]:<20} {amount_str:>12}"
        )

    click.echo("-" * 96)
    click.echo(f"{'Income':<12} {summary.income:>14,.2f}")
    click.echo(f"{'Expenses':<12} {summary.expenses:>14,.2f}")
    click.echo(f"{'Transfers':<12} {summary.transfers:>14,.2f}")
    click.echo(f"{'Total':<12} {summary.total:>14,.2f}")


def _echo_options(options) -> None:
    click.echo("Accounts: " + ", ".join(options.accounts))
    click.echo("Categories: " + ", ".join(kind.label for kind in options.kinds))
    click.echo("Sub-categories: " + ", ".join(options.sub_categories))
    click.echo("Names: " + ", ".join(options.parties))
    click.echo("Years: " + ", ".join(str(year) for year in options.years))


def register_commands(cli):
    """Register filter command with main CLI."""
    cli.add_command(filter_transactions)
