"""Dashboard commands."""

from datetime import date

import click
from duoledger.cli.services import report_service


@click.group()
def dashboard_group():
    """Dashboard views."""
    pass


@dashboard_group.command("balances")
@click.pass_context
def balances(ctx):
    """Show the balance sheet of each tracked party.

    Balance is income minus expenses minus transfers out plus the transfers
    the other party sent.
    """
    rows = report_service(ctx).party_balances()

    click.echo("\nParty Balances")
    click.echo("-" * 86)
    click.echo(
        f"{'Name':<14} {'Income':>12} {'Expenses':>12} {'Transf.Out':>12} {'Transf.In':>12} {'Count':>7} {'Balance':>12}"
    )
    click.echo("-" * 86)
    for row in rows:
        click.echo(
            f"{row.party:<14} {row.income:>12,.2f} {row.expenses:>12,.2f} {row.transfers_out:>12,.2f} "
            f"{row.transfers_in:>12,.2f} {row.transaction_count:>7} {row.balance:>12,.2f}"
        )


@dashboard_group.command("cashflow")
@click.pass_context
def cashflow(ctx):
    """Show the running balance (income minus expenses) by date."""
    points = report_service(ctx).running_balance()

    if not points:
        click.echo("No income or expense transactions found.")
        return

    click.echo("\nCash Flow")
    click.echo("-" * 26)
    click.echo(f"{'Date':<12} {'Balance':>13}")
    click.echo("-" * 26)
    for point in points:
        click.echo(f"{str(point.date):<12} {point.balance:>13,.2f}")


@dashboard_group.command("metrics")
@click.option("--recent", default=5, show_default=True, help="Number of recent transactions to show")
@click.pass_context
def metrics(ctx, recent: int):
    """Show headline totals, the monthly comparison and recent activity."""
    service = report_service(ctx)
    figures = service.dashboard_metrics(today=date.today())

    click.echo("\nDashboard")
    click.echo("-" * 40)
    click.echo(f"{'Total income':<22} {figures.total_income:>17,.2f}")
    click.echo(f"{'Total expenses':<22} {figures.total_expense:>17,.2f}")
    click.echo(f"{'Net balance':<22} {figures.net_balance:>17,.2f}")
    click.echo(f"{'Average transaction':<22} {figures.avg_transaction:>17,.2f}")
    click.echo(f"{'Income trend (30d)':<22} {figures.trend:>16,.1f}%")

    comparison = service.monthly_comparison()
    if comparison:
        click.echo("\nIncome vs Expenses")
        click.echo("-" * 48)
        click.echo(f"{'Month':<8} {'Income':>12} {'Expenses':>12} {'Net':>12}")
        for month in comparison:
            click.echo(f"{month.label:<8} {month.income:>12,.2f} {month.expense:>12,.2f} {month.net:>12,.2f}")

    activity = service.recent_activity(limit=recent)
    if activity:
        click.echo("\nRecent Activity")
        click.echo("-" * 60)
        for txn in activity:
            click.echo(
                f"{str(txn.date):<12} {txn.party[:12]:<12} {txn.category_label:<10} "
                f"{txn.sub_category[:12]:<12} {txn.amount:>10,.2f}"
            )


@dashboard_group.command("expenses")
@click.option("--limit", default=5, show_default=True, help="Number of sub-categories to show (0 for all)")
@click.pass_context
def expenses(ctx, limit: int):
    """Show the largest expense sub-categories."""
    breakdown = report_service(ctx).expense_breakdown(limit=limit or None)

    if not breakdown:
        click.echo("No expenses found.")
        return

    total = sum(item.amount for item in breakdown)
    click.echo("\nTop Expenses")
    click.echo("-" * 50)
    for item in breakdown:
        share = item.amount / total * 100 if total else 0
        click.echo(f"{item.name[:24]:<24} {item.amount:>13,.2f} {share:>9,.1f}%")


def register_commands(cli: click.Group) -> None:
    """Register dashboard commands with main CLI."""
    cli.add_command(dashboard_group, name="dashboard")
