"""Main CLI entry point."""

import click
from duoledger.config import load_settings
from duoledger.database.factories import create_sqlite_store
from duoledger.domain.entities import ActorContext, Role
from duoledger.domain.errors import DomainError
from duoledger.logging_setup import configure_logging

# Import and register all commands at module level
from duoledger.cli.commands import (
    add,
    audit,
    dashboard,
    filter,
    import_cmd,
    report,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DUOLEDGER_DB_PATH environment variable)",
    envvar="DUOLEDGER_DB_PATH",
)
@click.option(
    "--actor",
    default="admin",
    show_default=True,
    envvar="DUOLEDGER_ACTOR",
    help="Name recorded as the acting user",
)
@click.option(
    "--role",
    type=click.Choice([role.value for role in Role], case_sensitive=False),
    default=Role.ADMIN.value,
    show_default=True,
    envvar="DUOLEDGER_ROLE",
    help="Role of the acting user (VIEWER can only read)",
)
@click.pass_context
def cli(ctx, db_path: str | None, actor: str, role: str):
    """Duoledger - Two-party household ledger.

    Record income, expenses and transfers between two tracked parties, import
    them from CSV and view monthly, balance and dashboard reports.
    """
    ctx.ensure_object(dict)

    # Initialize settings and database only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings()
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        configure_logging(settings.log_level)

        store = create_sqlite_store(database_path=db_path or settings.database_path)
        store.connect()
        store.initialize_schema()
        ctx.call_on_close(store.disconnect)

        ctx.obj["db"] = store
        ctx.obj["settings"] = settings
        ctx.obj["actor"] = ActorContext(name=actor, role=Role(role.upper()))


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
import_cmd.register_commands(cli)
report.register_commands(cli)
dashboard.register_commands(cli)
filter.register_commands(cli)
audit.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
