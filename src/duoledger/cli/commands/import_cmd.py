"""CSV import command."""

import click
from duoledger.cli.services import import_service


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import transactions from a CSV file.

    The header must name the columns date, name, account, category and amount;
    subCategory, notes and description are optional. Rows that fail validation
    are reported and skipped, the rest are imported.
    """
    service = import_service(ctx)

    try:
        result = service.import_csv(ctx.obj["actor"], csv_file_path=csv_file)
        click.echo(f"\nImport complete:")
        click.echo(f"  Imported: {result.success} rows")
        click.echo(f"  Failed: {result.failed} rows")
        if result.errors:
            click.echo(f"  Errors: {len(result.errors)}")
            for error in result.errors:
                click.echo(f"    {error}", err=True)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
