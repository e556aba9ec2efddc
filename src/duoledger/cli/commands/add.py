"""Add transaction command."""

import click
from duoledger.cli.error_handling import handle_domain_error
from duoledger.cli.services import transaction_service
from duoledger.domain.errors import DomainError
from duoledger.utils.amount_parser import parse_amount
from duoledger.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--account", required=True, help="Account label (e.g., Cash, Bank, POS)")
@click.option(
    "--category",
    required=True,
    help="Category: 'Te Hyra', 'Shpenzime', 'Transfere' (or Income, Expense, Transfer)",
)
@click.option("--sub-category", required=True, help="Sub-category (e.g., GINGER, Rroga, POS)")
@click.option("--name", "party", required=True, help="Party the transaction belongs to")
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--notes", help="Notes")
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    account: str,
    category: str,
    sub_category: str,
    party: str,
    amount: str,
    notes: str | None,
    description: str | None,
):
    """Add a transaction manually.

    A transfer is mirrored for the other tracked party with the opposite sign.

    Examples:
        duoledger add --date 2025-01-02 --account Bank --category "Te Hyra" --sub-category GINGER --name Burimi --amount 1500
        duoledger add --date today --account Cash --category Transfer --sub-category Transfere --name Burimi --amount 500
    """
    service = transaction_service(ctx)

    # Parse date
    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        ids = service.create_transaction(
            actor=ctx.obj["actor"],
            date=txn_date,
            account=account,
            category=category,
            sub_category=sub_category,
            party=party,
            amount=txn_amount,
            notes=notes,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    txn = service.get_transaction(ids[0])
    click.echo(f"Created transaction {ids[0]}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Name: {txn.party}")
    click.echo(f"  Category: {txn.category_label} / {txn.sub_category}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    if len(ids) > 1:
        counterpart = ctx.obj["settings"].parties.other(txn.party)
        click.echo(f"  Mirrored as transaction {ids[1]} for {counterpart} ({-txn.amount:,.2f})")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
