"""Transaction management commands."""

import click
from duoledger.cli.error_handling import handle_domain_error
from duoledger.cli.services import transaction_service
from duoledger.domain.errors import DomainError
from duoledger.utils.amount_parser import parse_amount
from duoledger.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.option("--name", "party", help="Only transactions of this party")
@click.option("--all", "show_all", is_flag=True, help="Also show the incoming side of transfers")
@click.option("--verbose", "-v", is_flag=True, help="Show all columns including notes, description and audit fields")
@click.pass_context
def list_transactions(ctx, start_date: str, end_date: str, party: str, show_all: bool, verbose: bool):
    """View transactions, newest first.

    The mirrored (incoming) side of a transfer is hidden unless --all is given.
    """
    service = transaction_service(ctx)

    # Parse dates
    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    transactions = [
        txn
        for txn in service.list_transactions(include_incoming_transfers=show_all)
        if (start is None or txn.date >= start)
        and (end is None or txn.date <= end)
        and (party is None or txn.party == party)
    ]

    if not transactions:
        click.echo("No transactions found.")
        return

    if verbose:
        click.echo(f"\nFound {len(transactions)} transaction(s):")
        click.echo("=" * 100)
        for txn in transactions:
            _echo_details(txn)
            click.echo("-" * 100)
    else:
        click.echo(f"\nFound {len(transactions)} transaction(s):")
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<6} {'Date':<12} {'Name':<12} {'Account':<12} {'Category':<12} {'SubCategory':<20} {'Amount':>12}"
        )
        click.echo("-" * 100)

        for txn in transactions:
            amount_str = f"{txn.amount:,.2f}"
            click.echo(
                f"{txn.id:<6} {str(txn.date):<12} {txn.party[:12]:<12} {txn.account[:12]:<12} "
                f"{txn.category_label:<12} {txn.sub_category[:20]:<20} {amount_str:>12}"
            )

    click.echo("-" * 100)
    click.echo(f"Count: {len(transactions)}")


def _echo_details(txn) -> None:
    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Name: {txn.party}")
    click.echo(f"  Account: {txn.account}")
    click.echo(f"  Category: {txn.category_label}")
    click.echo(f"  SubCategory: {txn.sub_category}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if txn.created_by:
        click.echo(f"  Created by: {txn.created_by}")
    if txn.modified_by:
        click.echo(f"  Modified by: {txn.modified_by}")
    if txn.created_at:
        click.echo(f"  Created: {txn.created_at}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show every field of one transaction."""
    service = transaction_service(ctx)
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)
    _echo_details(txn)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--account", help="Account label")
@click.option("--category", help="Category: 'Te Hyra', 'Shpenzime', 'Transfere' (or Income, Expense, Transfer)")
@click.option("--sub-category", help="Sub-category")
@click.option("--name", "party", help="Party the transaction belongs to")
@click.option("--amount", help="Transaction amount (e.g., 123.45)")
@click.option("--notes", help="Notes")
@click.option("--description", help="Transaction description")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    account: str | None,
    category: str | None,
    sub_category: str | None,
    party: str | None,
    amount: str | None,
    notes: str | None,
    description: str | None,
) -> None:
    """Update a transaction.

    Fields that are not given keep their current value. The other side of a
    transfer is not changed.

    Examples:
        duoledger transaction update 1 --amount 75.00
        duoledger transaction update 1 --sub-category GINGER --notes "shared project"
    """
    service = transaction_service(ctx)

    current = service.get_transaction(transaction_id)
    if current is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    # Parse date if provided
    txn_date = current.date
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    # Parse amount if provided
    txn_amount = current.amount
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        changes = service.update_transaction(
            actor=ctx.obj["actor"],
            transaction_id=transaction_id,
            date=txn_date,
            account=account if account is not None else current.account,
            category=category if category is not None else current.kind,
            sub_category=sub_category if sub_category is not None else current.sub_category,
            party=party if party is not None else current.party,
            amount=txn_amount,
            notes=notes if notes is not None else current.notes,
            description=description if description is not None else current.description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated transaction {transaction_id}")
    for change in changes:
        click.echo(f"  {change['field']}: {change['from']} -> {change['to']}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    The other side of a transfer is not deleted.

    Examples:
        duoledger transaction delete 1
    """
    service = transaction_service(ctx)

    # Get transaction info for display
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(ctx.obj["actor"], transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
